import pytest

from portfolio_engine.config.settings import Settings
from portfolio_engine.portfolio.allocation import (
    ADD_EQUITY_HINT,
    CONCENTRATED,
    NO_PORTFOLIO_DATA,
    NOT_AVAILABLE,
    TRIM_EQUITY_HINT,
    WELL_DIVERSIFIED,
    AllocationPolicy,
    aggregate_buckets,
    categorize_scheme,
    classify,
    value_holdings,
)
from portfolio_engine.portfolio.models import Holding, ValuedHolding
from portfolio_engine.providers.models import ResolvedPrice


def _valued(category: str, value: float | None, name: str | None = None) -> ValuedHolding:
    return ValuedHolding(
        name=name or f"{category} holding",
        category=category,  # type: ignore[arg-type]
        quantity=1.0,
        price=value,
        currency="INR",
        value=value,
    )


def test_equity_heavy_portfolio_is_high_risk_without_rebalancing() -> None:
    result = classify([_valued("Equity", 70.0), _valued("Debt", 30.0)])
    assert [(b.category, b.percentage_of_portfolio) for b in result.buckets] == [
        ("Equity", pytest.approx(70.0)),
        ("Debt", pytest.approx(30.0)),
    ]
    assert result.risk_profile == "High"
    assert result.diversification_score == CONCENTRATED
    assert result.rebalancing_suggestion is None


def test_risk_threshold_is_inclusive_at_sixty_percent() -> None:
    assert classify([_valued("Equity", 60.0), _valued("Debt", 40.0)]).risk_profile == "High"
    assert classify([_valued("Debt", 60.0), _valued("Equity", 40.0)]).risk_profile == "Low"
    assert classify([_valued("Equity", 50.0), _valued("Debt", 50.0)]).risk_profile == "Medium"
    assert classify([_valued("Hybrid", 100.0)]).risk_profile == "Medium"


def test_diversification_requires_three_buckets_under_concentration_cap() -> None:
    assert classify(
        [_valued("Equity", 70.0), _valued("Debt", 20.0), _valued("Hybrid", 10.0)]
    ).diversification_score == WELL_DIVERSIFIED
    assert classify(
        [_valued("Equity", 75.0), _valued("Debt", 15.0), _valued("Hybrid", 10.0)]
    ).diversification_score == CONCENTRATED
    assert classify([_valued("Equity", 50.0), _valued("Debt", 50.0)]).diversification_score == CONCENTRATED


def test_rebalancing_fires_only_above_guard_band() -> None:
    assert classify([_valued("Equity", 80.0), _valued("Debt", 20.0)]).rebalancing_suggestion is None
    assert classify([_valued("Equity", 81.0), _valued("Debt", 19.0)]).rebalancing_suggestion == (
        TRIM_EQUITY_HINT.format(threshold=80.0)
    )
    assert classify([_valued("Debt", 85.0), _valued("Equity", 15.0)]).rebalancing_suggestion == (
        ADD_EQUITY_HINT.format(threshold=80.0)
    )


def test_empty_and_zero_valued_inputs_have_explicit_defaults() -> None:
    for holdings in ([], [_valued("Equity", 0.0), _valued("Debt", 0.0)], [_valued("Equity", None)]):
        result = classify(holdings)
        assert result.buckets == []
        assert result.risk_profile == NOT_AVAILABLE
        assert result.diversification_score == NO_PORTFOLIO_DATA
        assert result.rebalancing_suggestion is None


def test_buckets_sum_to_one_hundred_and_count_holdings() -> None:
    buckets = aggregate_buckets(
        [
            _valued("Equity", 333.33),
            _valued("Equity", 111.11),
            _valued("Debt", 222.22),
            _valued("Hybrid", 77.0),
            _valued("Other", None),
        ]
    )
    assert sum(b.percentage_of_portfolio for b in buckets) == pytest.approx(100.0)
    assert buckets[0].category == "Equity"
    assert buckets[0].holding_count == 2
    assert buckets[0].total_value == pytest.approx(444.44)
    assert all(b.category != "Other" for b in buckets)


def test_equal_buckets_are_ordered_by_category_name() -> None:
    buckets = aggregate_buckets([_valued("Equity", 50.0), _valued("Debt", 50.0)])
    assert [b.category for b in buckets] == ["Debt", "Equity"]


def test_policy_thresholds_come_from_settings() -> None:
    policy = AllocationPolicy.from_settings(Settings(risk_equity_high_threshold=75.0))
    result = classify([_valued("Equity", 70.0), _valued("Debt", 30.0)], policy)
    assert result.risk_profile == "Medium"


def test_policy_rejects_non_exclusive_thresholds() -> None:
    with pytest.raises(ValueError, match="equity_high_risk"):
        AllocationPolicy(equity_high_risk=40.0)
    with pytest.raises(ValueError, match="max_concentration"):
        AllocationPolicy(max_concentration=0.0)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("HDFC Liquid Fund - Direct Growth", "Debt"),
        ("SBI Gilt Fund", "Debt"),
        ("ICICI Prudential Balanced Advantage Fund", "Hybrid"),
        ("Axis ELSS Tax Saver", "Equity"),
        ("Parag Parikh Flexi Cap Fund", "Equity"),
        ("Some Unnamed Scheme", "Hybrid"),
    ],
)
def test_categorize_scheme(name: str, expected: str) -> None:
    assert categorize_scheme(name) == expected


def test_value_holdings_prefers_resolved_market_price() -> None:
    holdings = [
        Holding(name="Infosys", category="Equity", quantity=10.0, price=1400.0, symbol="INFY", exchange="NSE"),
        Holding(name="Liquid Fund", category="Debt", quantity=100.0, price=50.0),
        Holding(name="Delisted", category="Equity", quantity=5.0, price=None),
    ]
    valued = value_holdings(holdings, {"INFY": ResolvedPrice(price=1500.0, currency="INR", source="yahoo")})
    assert [v.value for v in valued] == [15000.0, 5000.0, None]
    assert valued[0].price == 1500.0


def test_value_holdings_leaves_unconverted_prices_unvalued() -> None:
    holdings = [
        Holding(name="Apple", category="Equity", quantity=2.0, price=None, symbol="AAPL", exchange="US"),
        Holding(name="Global Bond Fund", category="Debt", quantity=3.0, price=10.0, currency="USD"),
        Holding(name="Gilt Fund", category="Debt", quantity=3.0, price=10.0),
    ]
    prices = {"AAPL": ResolvedPrice(price=200.0, currency="USD", source="yahoo", error="rate limited")}

    valued = value_holdings(holdings, prices, home_currency="INR")
    assert [(v.price, v.currency, v.value) for v in valued] == [
        (200.0, "USD", None),
        (10.0, "USD", None),
        (10.0, "INR", 30.0),
    ]
    assert value_holdings(holdings, prices)[0].value == 400.0
