import threading
import time
from typing import AsyncGenerator, Dict, Iterable, Optional

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from portfolio_dashboard.main import create_app
from portfolio_dashboard.models.portfolio import Exchange, Holding
from portfolio_dashboard.utils.cache import build_quote_cache
from portfolio_dashboard.utils.settings import Settings


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakePriceProvider:
    name = "fake-prices"

    def __init__(self, prices: Dict[str, Optional[float]], failing: Iterable[str] = (),
                 delays: Optional[Dict[str, float]] = None):
        self.prices = dict(prices)
        self.failing = set(failing)
        self.delays = delays or {}
        self.calls = []
        self._lock = threading.Lock()

    def get_current_price(self, symbol: str) -> Optional[float]:
        with self._lock:
            self.calls.append(symbol)
        if symbol in self.delays:
            time.sleep(self.delays[symbol])
        if symbol in self.failing:
            raise ConnectionError(f"quote service unavailable for {symbol}")
        return self.prices.get(symbol)


class FakeFundamentalsProvider:
    name = "fake-stats"

    def __init__(self, stats: Dict[str, dict], failing: Iterable[str] = ()):
        self.stats = stats
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def get_key_stats(self, ticker: str, exchange: str) -> dict:
        with self._lock:
            self.calls.append((ticker, exchange))
        if ticker in self.failing:
            raise ConnectionError(f"stats page unavailable for {ticker}")
        return dict(self.stats.get(ticker, {}))


def make_holding(ticker: str, purchase_price: float, quantity: int,
                 sector: str = "Technology", exchange: Exchange = Exchange.NASDAQ) -> Holding:
    return Holding(
        sector=sector,
        particulars=f"{ticker} Corp",
        purchase_price=purchase_price,
        quantity=quantity,
        exchange=exchange,
        ticker=ticker,
    )


@pytest.fixture()
def settings() -> Settings:
    return Settings(provider_timeout_seconds=1.0, max_concurrent_lookups=4)


@pytest.fixture()
def quote_cache(settings):
    return build_quote_cache(settings)


@pytest.fixture()
def price_provider() -> FakePriceProvider:
    return FakePriceProvider({
        "INFY.NS": 1500.0,
        "TCS.NS": 3300.0,
        "MSFT": 410.0,
        "HDFCBANK.NS": 1600.0,
        "ICICIBANK.NS": 950.0,
        "DRREDDY.NS": 5000.0,
        "PFE": 40.0,
        "HINDUNILVR.BO": 2500.0,
        "ITC.NS": 400.0,
    })


@pytest.fixture()
def fundamentals_provider() -> FakeFundamentalsProvider:
    return FakeFundamentalsProvider({
        "MSFT": {"peRatio": 35.2, "latestEarnings": 11.8},
        "INFY.NS": {"peRatio": 24.1},
    })


@pytest.fixture()
def app(settings, price_provider, fundamentals_provider) -> FastAPI:
    return create_app(settings, price_provider=price_provider,
                      fundamentals_provider=fundamentals_provider)


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
