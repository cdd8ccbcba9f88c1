"""Pure snapshot arithmetic: per-holding metrics, sector roll-ups and totals.

Nothing here does I/O. Holding-level values that depend on a live price are
``None`` when the price is unknown; sector and portfolio totals are always
numbers and count unknown holding values as 0.
"""
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from portfolio_dashboard.models.portfolio import (
    Holding, PortfolioSummary, SectorTotal, Snapshot
)

T = TypeVar("T")
R = TypeVar("R")


def maybe(value: Optional[T], fn: Callable[[T], Optional[R]]) -> Optional[R]:
    """Apply ``fn`` to a known value; an unknown value stays unknown."""
    if value is None:
        return None
    return fn(value)


def finite(value: float) -> Optional[float]:
    """``value`` if it is a real number, else ``None``."""
    return value if math.isfinite(value) else None


def percentage(part: float, whole: float) -> float:
    """``part`` as a percentage of ``whole``; 0 when ``whole`` is 0 or the ratio overflows."""
    if not whole:
        return 0.0
    result = part / whole * 100
    return result if math.isfinite(result) else 0.0


def derive_snapshot(
    holding: Holding,
    current_price: Optional[float] = None,
    pe_ratio: Optional[float] = None,
    latest_earnings: Optional[float] = None,
) -> Snapshot:
    investment = holding.purchase_price * holding.quantity

    # A price so large that the position overflows is as good as no price
    present_value = maybe(current_price, lambda price: finite(price * holding.quantity))
    gain_loss = maybe(present_value, lambda value: value - investment)
    gain_loss_percentage = maybe(
        gain_loss, lambda gain: finite(gain / investment * 100) if investment > 0 else None
    )

    # Inputs are already validated Holdings; skip re-validation of the copy
    return Snapshot.model_construct(
        **holding.model_dump(),
        investment=investment,
        portfolio_percentage=0.0,
        current_price=current_price,
        present_value=present_value,
        gain_loss=gain_loss,
        gain_loss_percentage=gain_loss_percentage,
        pe_ratio=pe_ratio,
        latest_earnings=latest_earnings,
    )


def aggregate_sectors(snapshots: Sequence[Snapshot]) -> List[SectorTotal]:
    """Sum investment, present value and gain/loss per sector, in first-seen order."""
    sums: Dict[str, List[float]] = {}

    for snapshot in snapshots:
        totals = sums.setdefault(snapshot.sector, [0.0, 0.0, 0.0])
        totals[0] += snapshot.investment
        totals[1] += snapshot.present_value if snapshot.present_value is not None else 0.0
        totals[2] += snapshot.gain_loss if snapshot.gain_loss is not None else 0.0

    return [
        SectorTotal(
            sector=sector,
            investment=investment,
            present_value=present_value,
            gain_loss=gain_loss,
            gain_loss_percentage=percentage(gain_loss, investment),
            portfolio_percentage=0.0,
        )
        for sector, (investment, present_value, gain_loss) in sums.items()
    ]


def summarize(sector_totals: Sequence[SectorTotal]) -> PortfolioSummary:
    total_investment = sum(sector.investment for sector in sector_totals)
    total_present_value = sum(sector.present_value for sector in sector_totals)
    total_gain_loss = sum(sector.gain_loss for sector in sector_totals)

    return PortfolioSummary(
        total_investment=total_investment,
        total_present_value=total_present_value,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percentage=percentage(total_gain_loss, total_investment),
    )


def apply_portfolio_percentages(
    snapshots: Sequence[Snapshot],
    sector_totals: Sequence[SectorTotal],
    total_investment: float,
) -> Tuple[List[Snapshot], List[SectorTotal]]:
    """Second pass: weight every holding and sector against the grand total.

    Returns new objects; the inputs are left untouched.
    """
    weighted_snapshots = [
        snapshot.model_copy(update={
            "portfolio_percentage": percentage(snapshot.investment, total_investment)
        })
        for snapshot in snapshots
    ]
    weighted_sectors = [
        sector.model_copy(update={
            "portfolio_percentage": percentage(sector.investment, total_investment)
        })
        for sector in sector_totals
    ]
    return weighted_snapshots, weighted_sectors
