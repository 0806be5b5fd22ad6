import pytest

from portfolio_engine.lib.valuation import adjust_for_inflation, holding_value, nominal_for_real


def test_holding_value_keeps_missing_price_missing() -> None:
    assert holding_value(10, 2.5) == 25.0
    assert holding_value(10, None) is None
    assert holding_value(0, 100.0) == 0.0


def test_adjust_for_inflation_discounts_by_annual_rate() -> None:
    assert adjust_for_inflation(106.0, 12) == 100.0
    assert adjust_for_inflation(100.0, 0) == 100.0
    assert adjust_for_inflation(1000.0, 24, annual_rate_percent=10.0) == pytest.approx(826.45)


def test_inflation_helpers_return_invalid_input_unchanged() -> None:
    assert adjust_for_inflation(-5.0, 12) == -5.0
    assert adjust_for_inflation(100.0, -1) == 100.0
    assert adjust_for_inflation(100.0, 12, annual_rate_percent=-2.0) == 100.0
    assert nominal_for_real(0.0, 12) == 0.0


def test_nominal_for_real_inverts_inflation_adjustment() -> None:
    assert nominal_for_real(100.0, 12) == 106.0
    assert nominal_for_real(100.0, 60, annual_rate_percent=0.0) == 100.0
