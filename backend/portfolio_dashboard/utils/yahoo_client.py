from typing import Optional

import yfinance as yf

from portfolio_dashboard.utils.logger import setup_logger

logger = setup_logger(__name__)


class YahooPriceClient:
    """Quotes from Yahoo Finance. Exchange-suffixed tickers (INFY.NS, ITC.BO) work as-is."""

    name = "yahoo"

    def __init__(self, timeout: float = 10):
        self.timeout = timeout

    def get_current_price(self, symbol: str) -> Optional[float]:
        # The last daily bar is still open during market hours, so its close is the live price
        history = yf.Ticker(symbol).history(period="5d", interval="1d", timeout=self.timeout)
        if history.empty:
            logger.info(f"No price data found for {symbol}")
            return None
        return float(history["Close"].iloc[-1])
