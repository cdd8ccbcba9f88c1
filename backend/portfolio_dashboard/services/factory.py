from portfolio_dashboard.data.holdings import DEFAULT_HOLDINGS
from portfolio_dashboard.services.market_data import FundamentalsSource, PriceSource
from portfolio_dashboard.services.portfolio import SnapshotService
from portfolio_dashboard.utils.cache import QuoteCache
from portfolio_dashboard.utils.fundamentals_table import StaticFundamentalsTable
from portfolio_dashboard.utils.google_finance import GoogleFinanceScraper
from portfolio_dashboard.utils.logger import setup_logger
from portfolio_dashboard.utils.settings import Settings

logger = setup_logger(__name__)


def build_price_provider(settings: Settings):
    if settings.price_provider == "yahoo":
        from portfolio_dashboard.utils.yahoo_client import YahooPriceClient
        return YahooPriceClient(timeout=settings.provider_timeout_seconds)
    if settings.price_provider == "polygon":
        from portfolio_dashboard.utils.polygon_client import PolygonPriceClient
        return PolygonPriceClient(settings.polygon_api_key, timeout=settings.provider_timeout_seconds)
    raise ValueError(f"Unknown PRICE_PROVIDER: {settings.price_provider}")


def build_fundamentals_provider(settings: Settings):
    if settings.fundamentals_provider == "google":
        return GoogleFinanceScraper(timeout=settings.provider_timeout_seconds)
    if settings.fundamentals_provider == "static":
        if not settings.fundamentals_table_path:
            raise ValueError("FUNDAMENTALS_TABLE_PATH is required for the static fundamentals provider")
        return StaticFundamentalsTable.from_json_file(settings.fundamentals_table_path)
    raise ValueError(f"Unknown FUNDAMENTALS_PROVIDER: {settings.fundamentals_provider}")


def build_snapshot_service(settings: Settings, cache: QuoteCache,
                           price_provider=None, fundamentals_provider=None) -> SnapshotService:
    """Wire the sources to their providers and the shared cache."""
    price_provider = price_provider or build_price_provider(settings)
    fundamentals_provider = fundamentals_provider or build_fundamentals_provider(settings)

    logger.info(
        f"Snapshot service using {price_provider.name} prices and "
        f"{fundamentals_provider.name} fundamentals"
    )

    return SnapshotService(
        price_source=PriceSource(
            price_provider, cache,
            timeout_seconds=settings.provider_timeout_seconds,
            max_concurrency=settings.max_concurrent_lookups,
        ),
        fundamentals_source=FundamentalsSource(
            fundamentals_provider, cache,
            timeout_seconds=settings.provider_timeout_seconds,
            max_concurrency=settings.max_concurrent_lookups,
        ),
        default_holdings=DEFAULT_HOLDINGS,
    )
