import asyncio
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from portfolio_dashboard.models.portfolio import (
    Holding, PortfolioSnapshotResponse, parse_holdings
)
from portfolio_dashboard.services.aggregator import (
    aggregate_sectors, apply_portfolio_percentages, derive_snapshot, summarize
)
from portfolio_dashboard.services.market_data import FundamentalsSource, PriceSource
from portfolio_dashboard.utils.logger import setup_logger

logger = setup_logger(__name__)


class SnapshotService:
    def __init__(self, price_source: PriceSource, fundamentals_source: FundamentalsSource,
                 default_holdings: Sequence[Holding] = ()):
        self.price_source = price_source
        self.fundamentals_source = fundamentals_source
        self.default_holdings = list(default_holdings)

    async def build_snapshot(self, holdings: Optional[Sequence[Any]] = None) -> PortfolioSnapshotResponse:
        """Fetch market data for the holdings and compute the full snapshot.

        Raises HoldingsValidationError before any fetch if ``holdings`` is
        malformed. Provider failures only show up as missing optional fields.
        """
        validated: List[Holding] = (
            self.default_holdings if holdings is None else parse_holdings(holdings)
        )

        tickers = [holding.ticker for holding in validated]
        pairs = [(holding.ticker, holding.exchange) for holding in validated]

        # Prices and fundamentals are independent; fetch them side by side
        price_map, stats_map = await asyncio.gather(
            self.price_source.get_prices(tickers),
            self.fundamentals_source.get_fundamentals(pairs),
        )

        snapshots = []
        for holding in validated:
            stats = stats_map.get(holding.ticker)
            snapshots.append(derive_snapshot(
                holding,
                current_price=price_map.get(holding.ticker),
                pe_ratio=stats.pe_ratio if stats else None,
                latest_earnings=stats.latest_earnings if stats else None,
            ))

        sector_totals = aggregate_sectors(snapshots)
        summary = summarize(sector_totals)
        snapshots, sector_totals = apply_portfolio_percentages(
            snapshots, sector_totals, summary.total_investment
        )

        logger.info(
            f"Built snapshot for {len(validated)} holdings "
            f"({len(price_map)} priced, {len(sector_totals)} sectors)"
        )

        return PortfolioSnapshotResponse(
            holdings=snapshots,
            sector_totals=sector_totals,
            summary=summary,
            generated_at=datetime.now(timezone.utc),
        )
