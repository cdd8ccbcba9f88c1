import pytest
from pydantic import ValidationError

from portfolio_dashboard.models.portfolio import (
    Holding, HoldingsValidationError, MarketData, parse_holdings
)


def _raw(**overrides):
    raw = {"sector": "Tech", "particulars": "Microsoft", "purchasePrice": 400,
           "quantity": 2, "exchange": "NASDAQ", "ticker": "MSFT"}
    raw.update(overrides)
    return raw


def test_whole_float_quantity_is_accepted():
    holding = Holding.model_validate(_raw(quantity=10.0))
    assert holding.quantity == 10
    assert isinstance(holding.quantity, int)


@pytest.mark.parametrize("quantity", [10.5, "10", True, 0, -3])
def test_bad_quantities_are_rejected(quantity):
    with pytest.raises(ValidationError):
        Holding.model_validate(_raw(quantity=quantity))


@pytest.mark.parametrize("price", [float("inf"), float("nan")])
def test_non_finite_purchase_price_is_rejected(price):
    with pytest.raises(HoldingsValidationError) as exc_info:
        parse_holdings([_raw(purchasePrice=price)])

    assert exc_info.value.errors[0]["loc"] == ["holdings", 0, "purchasePrice"]


def test_overflowing_investment_is_rejected_on_its_record():
    with pytest.raises(HoldingsValidationError) as exc_info:
        parse_holdings([_raw(), _raw(purchasePrice=1e308, quantity=10)])

    assert [err["loc"] for err in exc_info.value.errors] == [["holdings", 1]]


def test_overflowing_portfolio_total_is_rejected():
    with pytest.raises(HoldingsValidationError) as exc_info:
        parse_holdings([_raw(purchasePrice=1e308, quantity=1), _raw(purchasePrice=1e308, quantity=1)])

    assert exc_info.value.errors[0]["loc"] == ["holdings", 1]


def test_market_data_rejects_non_finite_values():
    for field in ("currentPrice", "peRatio", "latestEarnings"):
        with pytest.raises(ValidationError):
            MarketData.model_validate({field: float("inf")})
    assert MarketData(latest_earnings=-2.5).latest_earnings == -2.5
