import math
from typing import Dict, Iterable, Optional, Protocol, Tuple

from pydantic import ValidationError

from portfolio_dashboard.models.portfolio import MarketData
from portfolio_dashboard.services.batch import gather_settled, run_blocking
from portfolio_dashboard.utils.cache import FUNDAMENTALS_NAMESPACE, PRICE_NAMESPACE, QuoteCache
from portfolio_dashboard.utils.logger import setup_logger

logger = setup_logger(__name__)


class PriceProvider(Protocol):
    name: str

    def get_current_price(self, symbol: str) -> Optional[float]:
        ...


class FundamentalsProvider(Protocol):
    name: str

    def get_key_stats(self, ticker: str, exchange: str) -> Dict[str, float]:
        ...


class PriceSource:
    """Batch price lookups backed by the ``price`` cache namespace."""

    def __init__(self, provider: PriceProvider, cache: QuoteCache,
                 timeout_seconds: Optional[float] = 10.0, max_concurrency: Optional[int] = None):
        self.provider = provider
        self.cache = cache
        self.timeout_seconds = timeout_seconds
        self.max_concurrency = max_concurrency

    async def get_price(self, ticker: str) -> float:
        """Fetch one price, raising if the provider has no usable value."""
        cached_price = self.cache.get(PRICE_NAMESPACE, ticker)
        if cached_price is not None:
            logger.info(f"[Cache Hit] {self.provider.name} price for {ticker}: {cached_price}")
            return cached_price

        logger.info(f"[Cache Miss] Fetching {self.provider.name} price for {ticker}")
        price = await run_blocking(self.provider.get_current_price, ticker)
        if price is None:
            raise LookupError(f"No price data found for {ticker}")
        if not math.isfinite(price) or price <= 0:
            raise ValueError(f"Unusable price {price} for {ticker}")

        self.cache.set(PRICE_NAMESPACE, ticker, price)
        return price

    async def get_prices(self, tickers: Iterable[str]) -> Dict[str, float]:
        """Prices for every ticker that resolved; failed tickers are left out."""
        results = await gather_settled(
            tickers, self.get_price,
            timeout=self.timeout_seconds, max_concurrency=self.max_concurrency,
        )

        prices: Dict[str, float] = {}
        for ticker, settled in results.items():
            if settled.ok:
                prices[ticker] = settled.value
            else:
                logger.warning(
                    f"Error fetching {self.provider.name} price for {ticker}: "
                    f"{type(settled.error).__name__}: {settled.error}"
                )

        logger.info(f"Resolved {len(prices)}/{len(results)} prices")
        return prices


def _fundamentals_key(ticker: str, exchange: str) -> str:
    return f"{ticker}:{exchange}"


class FundamentalsSource:
    """Batch P/E and EPS lookups backed by the ``fundamentals`` cache namespace."""

    def __init__(self, provider: FundamentalsProvider, cache: QuoteCache,
                 timeout_seconds: Optional[float] = 10.0, max_concurrency: Optional[int] = None):
        self.provider = provider
        self.cache = cache
        self.timeout_seconds = timeout_seconds
        self.max_concurrency = max_concurrency

    async def get_stats(self, pair: Tuple[str, str]) -> MarketData:
        ticker, exchange = pair
        cache_key = _fundamentals_key(ticker, exchange)

        cached_stats = self.cache.get(FUNDAMENTALS_NAMESPACE, cache_key)
        if cached_stats is not None:
            logger.info(f"[Cache Hit] {self.provider.name} stats for {ticker}")
            return cached_stats

        logger.info(f"[Cache Miss] Fetching {self.provider.name} stats for {ticker}")
        raw = await run_blocking(self.provider.get_key_stats, ticker, exchange)
        stats = _to_market_data(ticker, raw)

        self.cache.set(FUNDAMENTALS_NAMESPACE, cache_key, stats)
        return stats

    async def get_fundamentals(self, pairs: Iterable[Tuple[str, str]]) -> Dict[str, MarketData]:
        """Stats per ticker. A failed lookup maps its ticker to an empty MarketData."""
        normalized = [(ticker, getattr(exchange, "value", exchange)) for ticker, exchange in pairs]
        results = await gather_settled(
            normalized, self.get_stats,
            timeout=self.timeout_seconds, max_concurrency=self.max_concurrency,
        )

        fundamentals: Dict[str, MarketData] = {}
        for (ticker, _), settled in results.items():
            if settled.ok:
                fundamentals[ticker] = settled.value
            else:
                logger.warning(
                    f"Error fetching {self.provider.name} stats for {ticker}: "
                    f"{type(settled.error).__name__}: {settled.error}"
                )
                fundamentals.setdefault(ticker, MarketData())

        return fundamentals


def _to_market_data(ticker: str, raw: Dict[str, float]) -> MarketData:
    """Keep only the fields that pass MarketData validation."""
    fields = {}
    for name in ("peRatio", "latestEarnings"):
        value = raw.get(name)
        if value is None:
            continue
        try:
            MarketData.model_validate({name: value})
        except ValidationError:
            logger.warning(f"Discarding invalid {name}={value!r} for {ticker}")
            continue
        fields[name] = value
    return MarketData.model_validate(fields)
