import json
from typing import Any, Dict, Mapping

from portfolio_dashboard.utils.logger import setup_logger

logger = setup_logger(__name__)


class StaticFundamentalsTable:
    """Fundamentals served from a fixed ticker -> stats mapping.

    Stand-in for the Google Finance scraper when scraping is unwanted
    (offline runs, demos, tests).
    """

    name = "static"

    def __init__(self, table: Mapping[str, Mapping[str, Any]]):
        self.table = {ticker: dict(stats) for ticker, stats in table.items()}

    @classmethod
    def from_json_file(cls, path: str) -> "StaticFundamentalsTable":
        with open(path) as f:
            table = json.load(f)
        logger.info(f"Loaded fundamentals for {len(table)} tickers from {path}")
        return cls(table)

    def get_key_stats(self, ticker: str, exchange: str) -> Dict[str, Any]:
        return dict(self.table.get(ticker, {}))
