"""XIRR (extended internal rate of return) via Newton-Raphson.

The solver finds ``r`` such that

    f(r) = sum(a_i / (1 + r) ** (t_i / 365)) = 0

where ``t_i`` is the number of days between flow ``i`` and the first flow.
The last flow is the valuation point and may not be negative.
It never raises for bad data: every failure mode is reported through
``XirrResult(converged=False, error=...)`` and ``rate`` stays ``None``.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from portfolio_engine.portfolio.models import CashFlow, XirrResult

DAYS_PER_YEAR = 365.0
DEFAULT_GUESS = 0.1
DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 100
MIN_DERIVATIVE = 1e-10
MIN_RATE = -0.999
MAX_RATE = 100.0


def _year_fractions(series: Sequence[CashFlow]) -> np.ndarray:
    base = series[0].date
    return np.array([(flow.date - base).days / DAYS_PER_YEAR for flow in series], dtype=float)


def _npv_and_derivative(amounts: np.ndarray, years: np.ndarray, rate: float) -> tuple[float, float]:
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        factors = np.power(1.0 + rate, years)
        value = float(np.sum(amounts / factors))
        derivative = float(np.sum(-amounts * years / (factors * (1.0 + rate))))
    return value, derivative


def npv(series: Sequence[CashFlow], rate: float) -> float:
    """Net present value of ``series`` discounted to its first date."""
    if not series:
        return 0.0
    amounts = np.array([flow.amount for flow in series], dtype=float)
    value, _ = _npv_and_derivative(amounts, _year_fractions(series), rate)
    return value


def _validate(series: Sequence[CashFlow]) -> str | None:
    if len(series) < 2:
        return "At least 2 cash flows required for XIRR calculation."
    for previous, current in zip(series, series[1:]):
        if current.date <= previous.date:
            return "Cash flow dates must be strictly increasing."
    amounts = [flow.amount for flow in series]
    if not all(math.isfinite(amount) for amount in amounts):
        return "Cash flow amounts must be finite numbers."
    if sum(abs(amount) for amount in amounts) <= 0:
        return "Cash flows are all zero."
    if amounts[-1] < 0:
        return "The final cash flow (valuation point) must be non-negative."
    return None


def compute_xirr(
    series: Sequence[CashFlow],
    guess: float = DEFAULT_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> XirrResult:
    error = _validate(series)
    if error:
        return XirrResult(rate=None, converged=False, error=error)

    has_positive = any(flow.amount > 0 for flow in series)
    has_negative = any(flow.amount < 0 for flow in series)
    if has_negative and not has_positive and series[-1].amount == 0:
        # Everything invested, nothing left: the limit of the return is -100%.
        return XirrResult(rate=-1.0, converged=True)
    if not has_positive or not has_negative:
        return XirrResult(
            rate=None,
            converged=False,
            error="XIRR requires both positive and negative cash flows.",
        )

    amounts = np.array([flow.amount for flow in series], dtype=float)
    years = _year_fractions(series)
    rate = guess
    for iteration in range(1, max_iterations + 1):
        value, derivative = _npv_and_derivative(amounts, years, rate)
        if not math.isfinite(value) or not math.isfinite(derivative):
            return XirrResult(rate=None, converged=False, error="Numerical overflow during iteration.", iterations=iteration)
        if abs(value) < tolerance:
            return XirrResult(rate=rate, converged=True, iterations=iteration)
        if abs(derivative) < MIN_DERIVATIVE:
            return XirrResult(
                rate=None,
                converged=False,
                error="Derivative too small, cannot converge.",
                iterations=iteration,
            )

        next_rate = rate - value / derivative
        if not math.isfinite(next_rate) or next_rate <= MIN_RATE or next_rate > MAX_RATE:
            return XirrResult(
                rate=None,
                converged=False,
                error="Rate out of reasonable bounds.",
                iterations=iteration,
            )
        if abs(next_rate - rate) < tolerance:
            return XirrResult(rate=next_rate, converged=True, iterations=iteration)
        rate = next_rate

    return XirrResult(
        rate=None,
        converged=False,
        error="Maximum iterations reached without convergence.",
        iterations=max_iterations,
    )
