"""Return interpretation and plain-text portfolio summary generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from portfolio_engine.lib.formatters import format_compact_inr
from portfolio_engine.portfolio.models import Classification, XirrResult

Band = Literal["High", "Medium", "Low"]

# (minimum percent, label, band, context), checked top-down.
XIRR_BANDS: tuple[tuple[float, str, Band, str], ...] = (
    (15.0, "Excellent", "High", "Well above average mutual fund returns"),
    (12.0, "Strong", "High", "Above average performance"),
    (10.0, "Good", "Medium", "Competitive with market average"),
    (7.0, "Moderate", "Medium", "Below average but acceptable"),
    (4.0, "Below average", "Low", "May consider rebalancing"),
)
CATEGORY_DESCRIPTIONS = {
    "Equity": "Growth-oriented investments in stocks with higher volatility",
    "Debt": "Stable fixed-income investments with lower risk",
    "Hybrid": "Balanced mix of equity and debt for moderate risk-return",
    "Other": "Holdings outside the equity, debt and hybrid categories",
}


@dataclass
class XirrInterpretation:
    interpretation: str
    category: Band
    context: str | None = None


def interpret_xirr(result: XirrResult) -> XirrInterpretation:
    if not result.converged or result.rate is None:
        return XirrInterpretation(interpretation="Unable to calculate returns", category="Low")
    percent = result.rate * 100.0
    for minimum, label, band, context in XIRR_BANDS:
        if percent >= minimum:
            return XirrInterpretation(f"{label} {percent:.1f}% annualized return", band, context)
    return XirrInterpretation(f"Poor {percent:.1f}% annualized return", "Low", "Needs immediate attention")


def category_description(category: str) -> str:
    return CATEGORY_DESCRIPTIONS.get(category, "Investment allocation category")


def generate_summary(classification: Classification, xirr: XirrResult, total_value: float) -> str:
    if not classification.buckets:
        return "No portfolio data is available to summarise."
    mix = ", ".join(
        f"{bucket.category} {bucket.display_percentage(1):.1f}%" for bucket in classification.buckets
    )
    returns = interpret_xirr(xirr).interpretation
    text = (
        f"Portfolio valued at {format_compact_inr(total_value)} ({mix}). "
        f"Risk profile: {classification.risk_profile}. "
        f"Diversification: {classification.diversification_score}. "
        f"Returns: {returns}."
    )
    if classification.rebalancing_suggestion:
        text = f"{text} Suggested improvement: {classification.rebalancing_suggestion}"
    return text
