import requests
from bs4 import BeautifulSoup
from typing import Dict, Optional
from portfolio_dashboard.utils.logger import setup_logger

logger = setup_logger(__name__)

GOOGLE_FINANCE_QUOTE_URL = "https://www.google.com/finance/quote/"

# Key-stats rows on the quote page: label and value cells
STAT_ROW_SELECTOR = ".gyFHrc"
STAT_LABEL_SELECTOR = ".mfs7Fc"
STAT_VALUE_SELECTOR = ".P6K39c"


def google_finance_url(ticker: str, exchange: str) -> str:
    """Map a Yahoo-style ticker plus exchange to a Google Finance quote URL."""
    exchange = getattr(exchange, "value", exchange)

    if ticker.endswith(".NS"):
        return f"{GOOGLE_FINANCE_QUOTE_URL}{ticker[:-len('.NS')]}:NSE"
    if ticker.endswith(".BO"):
        return f"{GOOGLE_FINANCE_QUOTE_URL}{ticker[:-len('.BO')]}:BSE"
    if exchange in ("NASDAQ", "NYSE"):
        return f"{GOOGLE_FINANCE_QUOTE_URL}{ticker}:{exchange}"

    return f"{GOOGLE_FINANCE_QUOTE_URL}{ticker}"


def _parse_number(text: str) -> Optional[float]:
    try:
        return float(text.replace(",", "").strip())
    except ValueError:
        return None


def parse_key_stats(html: str) -> Dict[str, float]:
    """Pull P/E ratio and EPS out of a Google Finance quote page.

    Returns camelCase keys (``peRatio``, ``latestEarnings``) for whichever
    values were present and numeric.
    """
    soup = BeautifulSoup(html, 'html.parser')
    stats: Dict[str, float] = {}

    for row in soup.select(STAT_ROW_SELECTOR):
        label_elem = row.select_one(STAT_LABEL_SELECTOR)
        value_elem = row.select_one(STAT_VALUE_SELECTOR)
        if not label_elem or not value_elem:
            continue

        label = label_elem.get_text(strip=True)
        value = _parse_number(value_elem.get_text(strip=True))
        if value is None:
            continue

        if "P/E ratio" in label:
            stats["peRatio"] = value
        elif "EPS" in label:
            stats["latestEarnings"] = value

    return stats


class GoogleFinanceScraper:
    name = "google"

    def __init__(self, timeout: float = 10):
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
        })

    def get_key_stats(self, ticker: str, exchange: str) -> Dict[str, float]:
        url = google_finance_url(ticker, exchange)
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()

        stats = parse_key_stats(response.text)
        logger.info(f"Scraped {len(stats)} stats for {ticker} from {url}")
        return stats

    def close(self):
        self.session.close()
