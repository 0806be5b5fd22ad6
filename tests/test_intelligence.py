from portfolio_engine.portfolio.allocation import classify
from portfolio_engine.portfolio.intelligence import category_description, generate_summary, interpret_xirr
from portfolio_engine.portfolio.models import ValuedHolding, XirrResult


def test_interpret_xirr_bands() -> None:
    excellent = interpret_xirr(XirrResult(rate=0.16, converged=True))
    assert excellent.interpretation == "Excellent 16.0% annualized return"
    assert excellent.category == "High"

    moderate = interpret_xirr(XirrResult(rate=0.08, converged=True))
    assert moderate.interpretation.startswith("Moderate")
    assert moderate.category == "Medium"

    poor = interpret_xirr(XirrResult(rate=-0.05, converged=True))
    assert poor.interpretation == "Poor -5.0% annualized return"
    assert poor.category == "Low"


def test_interpret_xirr_handles_non_converged_result() -> None:
    result = interpret_xirr(XirrResult(rate=None, converged=False, error="Derivative too small, cannot converge."))
    assert result.interpretation == "Unable to calculate returns"
    assert result.category == "Low"
    assert result.context is None


def test_category_description_falls_back_for_unknown_category() -> None:
    assert "fixed-income" in category_description("Debt")
    assert category_description("Crypto") == "Investment allocation category"


def test_generate_summary_mentions_mix_risk_and_returns() -> None:
    classification = classify(
        [
            ValuedHolding("Index Fund", "Equity", 1.0, 9_000_000.0, "INR", 9_000_000.0),
            ValuedHolding("Gilt Fund", "Debt", 1.0, 1_000_000.0, "INR", 1_000_000.0),
        ]
    )
    summary = generate_summary(classification, XirrResult(rate=0.125, converged=True), 10_000_000.0)
    assert summary.startswith("Portfolio valued at ₹1.00 Cr (Equity 90.0%, Debt 10.0%).")
    assert "Risk profile: High." in summary
    assert "Returns: Strong 12.5% annualized return." in summary
    assert "Suggested improvement:" in summary


def test_generate_summary_without_holdings() -> None:
    summary = generate_summary(classify([]), XirrResult(rate=None, converged=False), 0.0)
    assert summary == "No portfolio data is available to summarise."
