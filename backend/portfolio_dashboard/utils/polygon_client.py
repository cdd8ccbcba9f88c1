from polygon import RESTClient
from typing import Optional
import os
from datetime import datetime, timedelta
from portfolio_dashboard.utils.logger import setup_logger

logger = setup_logger(__name__)


class PolygonPriceClient:
    """Latest daily close from Polygon. Covers US listings only."""

    name = "polygon"

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0):
        self.api_key = api_key or os.getenv("POLYGON_API_KEY")
        if not self.api_key:
            raise ValueError("POLYGON_API_KEY environment variable is required")
        self.client = RESTClient(self.api_key, connect_timeout=timeout, read_timeout=timeout)

    def get_current_price(self, symbol: str) -> Optional[float]:
        """Get the current/latest price for a symbol."""
        # Look back a week so weekends and holidays still yield a close
        end_date = datetime.today()
        start_date = end_date - timedelta(days=7)

        aggs = list(self.client.list_aggs(
            symbol,
            1,
            "day",
            start_date.strftime('%Y-%m-%d'),
            end_date.strftime('%Y-%m-%d'),
            adjusted="true",
            sort="desc",
            limit=1,
        ))

        if aggs:
            logger.debug(f"Polygon close for {symbol}: {aggs[0].close}")
            return float(aggs[0].close)
        return None
