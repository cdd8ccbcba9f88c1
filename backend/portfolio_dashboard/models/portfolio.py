# backend/portfolio_dashboard/models/portfolio.py
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime
from enum import Enum
import math


class Exchange(str, Enum):
    NSE = "NSE"
    BSE = "BSE"
    NASDAQ = "NASDAQ"
    NYSE = "NYSE"


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Holding(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    sector: str
    particulars: str
    purchase_price: float = Field(..., gt=0, allow_inf_nan=False)
    quantity: int = Field(..., gt=0, strict=True)
    exchange: Exchange
    ticker: str

    @field_validator("quantity", mode="before")
    @classmethod
    def whole_number_quantity(cls, value):
        # JSON has one number type: 10.0 is a whole quantity, 10.5 is not
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @model_validator(mode="after")
    def finite_investment(self):
        try:
            investment = self.purchase_price * self.quantity
        except OverflowError:
            investment = math.inf
        if not math.isfinite(investment):
            raise ValueError("purchasePrice * quantity is too large to represent")
        return self


class MarketData(CamelModel):
    current_price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    pe_ratio: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    latest_earnings: Optional[float] = Field(None, allow_inf_nan=False)


class Snapshot(Holding):
    investment: float
    portfolio_percentage: float = 0.0
    current_price: Optional[float] = None
    present_value: Optional[float] = None
    gain_loss: Optional[float] = None
    gain_loss_percentage: Optional[float] = None
    pe_ratio: Optional[float] = None
    latest_earnings: Optional[float] = None


class SectorTotal(CamelModel):
    sector: str
    investment: float
    present_value: float
    gain_loss: float
    gain_loss_percentage: float = 0.0
    portfolio_percentage: float = 0.0


class PortfolioSummary(CamelModel):
    total_investment: float
    total_present_value: float
    total_gain_loss: float
    total_gain_loss_percentage: float


class PortfolioSnapshotResponse(CamelModel):
    holdings: List[Snapshot]
    sector_totals: List[SectorTotal]
    summary: PortfolioSummary
    generated_at: datetime


class SnapshotRequest(CamelModel):
    holdings: Optional[List[Holding]] = None


class HoldingsValidationError(ValueError):
    """Raised when a holdings payload does not match the Holding schema."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in errors)
        super().__init__(f"Invalid holdings: {fields}")


def _error_details(exc: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def parse_snapshot_request(payload: Any) -> SnapshotRequest:
    """Validate a raw request body. An empty body means "use the defaults"."""
    if payload is None:
        return SnapshotRequest()
    try:
        return SnapshotRequest.model_validate(payload)
    except ValidationError as e:
        raise HoldingsValidationError(_error_details(e)) from e


def parse_holdings(items: Sequence[Any]) -> List[Holding]:
    """Coerce a sequence of Holding objects or mappings into Holdings."""
    holdings: List[Holding] = []
    errors: List[Dict[str, Any]] = []
    for index, item in enumerate(items):
        if isinstance(item, Holding):
            holdings.append(item)
            continue
        try:
            holdings.append(Holding.model_validate(item))
        except ValidationError as e:
            for detail in _error_details(e):
                detail["loc"] = ["holdings", index, *detail["loc"]]
                errors.append(detail)
    if errors:
        raise HoldingsValidationError(errors)

    total = 0.0
    for index, holding in enumerate(holdings):
        total += holding.purchase_price * holding.quantity
        if not math.isfinite(total):
            raise HoldingsValidationError([{
                "loc": ["holdings", index],
                "msg": "Total investment is too large to represent",
                "type": "value_error",
            }])
    return holdings
