"""Pure valuation helpers."""

from __future__ import annotations

DEFAULT_INFLATION_RATE_PERCENT = 6.0


def holding_value(quantity: float, price: float | None) -> float | None:
    """quantity x price; a missing price stays missing rather than becoming zero."""
    if price is None:
        return None
    return float(quantity) * float(price)


def _inflation_factor(months: float, annual_rate_percent: float) -> float:
    return (1 + annual_rate_percent / 100.0) ** (months / 12.0)


def adjust_for_inflation(
    nominal_value: float,
    months: float,
    annual_rate_percent: float = DEFAULT_INFLATION_RATE_PERCENT,
) -> float:
    """Real value, in today's money, of ``nominal_value`` received ``months`` from now."""
    if nominal_value <= 0 or months < 0 or annual_rate_percent < 0:
        return nominal_value
    return round(nominal_value / _inflation_factor(months, annual_rate_percent), 2)


def nominal_for_real(
    real_value: float,
    months: float,
    annual_rate_percent: float = DEFAULT_INFLATION_RATE_PERCENT,
) -> float:
    if real_value <= 0 or months < 0 or annual_rate_percent < 0:
        return real_value
    return round(real_value * _inflation_factor(months, annual_rate_percent), 2)
