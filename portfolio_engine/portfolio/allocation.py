"""Asset categorisation, bucket aggregation and risk classification."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Mapping

from portfolio_engine.config.settings import Settings
from portfolio_engine.lib.valuation import holding_value
from portfolio_engine.portfolio.models import (
    AllocationBucket,
    Category,
    Classification,
    Holding,
    ValuedHolding,
)
from portfolio_engine.providers.models import ResolvedPrice

LOGGER = logging.getLogger(__name__)

NOT_AVAILABLE = "Not available"
NO_PORTFOLIO_DATA = "No portfolio data"
WELL_DIVERSIFIED = "Well diversified"
CONCENTRATED = "Concentrated"
TRIM_EQUITY_HINT = "Equity exposure is above {threshold:g}% of the portfolio; consider trimming equity towards debt."
ADD_EQUITY_HINT = "Debt exposure is above {threshold:g}% of the portfolio; consider adding equity for long-term growth."

# Checked in order: Debt first, then Hybrid, then Equity.
CATEGORY_KEYWORDS: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (
        "Debt",
        (
            "liquid", "overnight", "ultra short", "short term", "medium term",
            "short duration", "medium duration", "long duration", "low duration",
            "gilt", "government securities", "treasury", "money market", "banking & psu",
            "banking and psu", "psu", "corporate bond", "credit risk", "income", "debt",
            "floating rate", "bond", "commercial paper", "certificate of deposit",
        ),
    ),
    (
        "Hybrid",
        (
            "hybrid", "balanced", "aggressive", "conservative", "equity savings",
            "dynamic asset allocation", "multi asset", "arbitrage", "balanced advantage",
            "equity & debt", "debt & equity", "equity and debt", "debt and equity",
        ),
    ),
    (
        "Equity",
        (
            "equity", "growth", "large cap", "mid cap", "small cap", "multicap", "multi cap",
            "flexi cap", "largecap", "midcap", "smallcap", "flexicap", "value", "momentum",
            "quality", "dividend yield", "sector", "thematic", "index", "nifty", "sensex",
            "bse", "nse", "elss",
        ),
    ),
)


@dataclass(frozen=True)
class AllocationPolicy:
    """Banding thresholds, all expressed in percent of portfolio value."""

    equity_high_risk: float = 60.0
    debt_low_risk: float = 60.0
    min_diversified_buckets: int = 3
    max_concentration: float = 70.0
    rebalance_equity_above: float = 80.0
    rebalance_debt_above: float = 80.0

    def __post_init__(self) -> None:
        for name in ("equity_high_risk", "debt_low_risk", "rebalance_equity_above", "rebalance_debt_above"):
            value = getattr(self, name)
            if not 50.0 <= value <= 100.0:
                raise ValueError(f"{name} must be between 50 and 100 so dominance is exclusive, received {value}.")
        if not 0.0 < self.max_concentration <= 100.0:
            raise ValueError("max_concentration must be within (0, 100].")
        if self.min_diversified_buckets < 1:
            raise ValueError("min_diversified_buckets must be at least 1.")

    @classmethod
    def from_settings(cls, settings: Settings) -> "AllocationPolicy":
        return cls(
            equity_high_risk=settings.risk_equity_high_threshold,
            debt_low_risk=settings.risk_debt_low_threshold,
            min_diversified_buckets=settings.diversification_min_buckets,
            max_concentration=settings.diversification_max_concentration,
            rebalance_equity_above=settings.rebalance_equity_threshold,
            rebalance_debt_above=settings.rebalance_debt_threshold,
        )


DEFAULT_POLICY = AllocationPolicy()


def categorize_scheme(scheme_name: str) -> Category:
    normalized = scheme_name.lower().strip()
    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword in normalized:
                LOGGER.debug("scheme categorized: name=%r category=%s keyword=%r", scheme_name, category, keyword)
                return category
    LOGGER.debug("scheme defaulted to Hybrid: name=%r", scheme_name)
    return "Hybrid"


def value_holding(holding: Holding, home_currency: str | None = None) -> ValuedHolding:
    foreign = home_currency is not None and holding.currency != home_currency
    return ValuedHolding(
        name=holding.name,
        category=holding.category,
        quantity=holding.quantity,
        price=holding.price,
        currency=holding.currency,
        value=None if foreign else holding_value(holding.quantity, holding.price),
    )


def value_holdings(
    holdings: Iterable[Holding],
    prices: Mapping[str, ResolvedPrice] | None = None,
    home_currency: str | None = None,
) -> list[ValuedHolding]:
    """Value holdings, preferring a resolved market price keyed by symbol.

    With ``home_currency`` set, a holding priced in any other currency keeps
    its price and currency but is valued at ``None`` so it cannot be summed
    with home-currency values.
    """
    valued: list[ValuedHolding] = []
    for holding in holdings:
        resolved = prices.get(holding.symbol) if prices and holding.symbol else None
        if resolved is None:
            valued.append(value_holding(holding, home_currency))
            continue
        value = holding_value(holding.quantity, resolved.price)
        if home_currency is not None and resolved.currency != home_currency and resolved.price is not None:
            LOGGER.warning(
                "holding left unvalued, price not in home currency: name=%r currency=%s home=%s",
                holding.name,
                resolved.currency,
                home_currency,
            )
            value = None
        valued.append(
            ValuedHolding(
                name=holding.name,
                category=holding.category,
                quantity=holding.quantity,
                price=resolved.price,
                currency=resolved.currency,
                value=value,
            )
        )
    return valued


def aggregate_buckets(holdings: Iterable[ValuedHolding]) -> list[AllocationBucket]:
    totals: dict[Category, float] = defaultdict(float)
    counts: dict[Category, int] = defaultdict(int)
    for holding in holdings:
        if holding.value is None or holding.value <= 0:
            continue
        totals[holding.category] += holding.value
        counts[holding.category] += 1

    portfolio_value = sum(totals.values())
    if portfolio_value <= 0:
        return []
    buckets = [
        AllocationBucket(
            category=category,
            total_value=value,
            percentage_of_portfolio=value * 100.0 / portfolio_value,
            holding_count=counts[category],
        )
        for category, value in totals.items()
    ]
    buckets.sort(key=lambda bucket: (-bucket.total_value, bucket.category))
    return buckets


def determine_risk_profile(buckets: list[AllocationBucket], policy: AllocationPolicy = DEFAULT_POLICY) -> str:
    if not buckets:
        return NOT_AVAILABLE
    shares = {bucket.category: bucket.percentage_of_portfolio for bucket in buckets}
    if shares.get("Equity", 0.0) >= policy.equity_high_risk:
        return "High"
    if shares.get("Debt", 0.0) >= policy.debt_low_risk:
        return "Low"
    return "Medium"


def assess_diversification(buckets: list[AllocationBucket], policy: AllocationPolicy = DEFAULT_POLICY) -> str:
    if not buckets:
        return NO_PORTFOLIO_DATA
    largest = max(bucket.percentage_of_portfolio for bucket in buckets)
    if len(buckets) >= policy.min_diversified_buckets and largest <= policy.max_concentration:
        return WELL_DIVERSIFIED
    return CONCENTRATED


def suggest_rebalancing(buckets: list[AllocationBucket], policy: AllocationPolicy = DEFAULT_POLICY) -> str | None:
    shares = {bucket.category: bucket.percentage_of_portfolio for bucket in buckets}
    if shares.get("Equity", 0.0) > policy.rebalance_equity_above:
        return TRIM_EQUITY_HINT.format(threshold=policy.rebalance_equity_above)
    if shares.get("Debt", 0.0) > policy.rebalance_debt_above:
        return ADD_EQUITY_HINT.format(threshold=policy.rebalance_debt_above)
    return None


def classify(holdings: Iterable[ValuedHolding], policy: AllocationPolicy = DEFAULT_POLICY) -> Classification:
    buckets = aggregate_buckets(holdings)
    if not buckets:
        return Classification(
            buckets=[],
            risk_profile=NOT_AVAILABLE,
            diversification_score=NO_PORTFOLIO_DATA,
            rebalancing_suggestion=None,
        )
    return Classification(
        buckets=buckets,
        risk_profile=determine_risk_profile(buckets, policy),
        diversification_score=assess_diversification(buckets, policy),
        rebalancing_suggestion=suggest_rebalancing(buckets, policy),
    )
