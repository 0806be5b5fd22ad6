"""SIP corpus projections for goal planning.

Rates are annual percentages (typically a converged XIRR) compounded
monthly; contributions are made at the start of each month.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

MAX_PROJECTION_MONTHS = 600


@dataclass
class Projection:
    corpus: float
    months: int


def _monthly_rate(annual_rate_percent: float) -> float:
    return annual_rate_percent / 100.0 / 12.0


def calculate_corpus(monthly_sip: float, annual_rate_percent: float, months: int) -> float:
    """FV = P * [((1 + r)^n - 1) / r] * (1 + r)."""
    if monthly_sip <= 0 or annual_rate_percent < 0 or months <= 0:
        return 0.0
    rate = _monthly_rate(annual_rate_percent)
    if rate == 0:
        return round(monthly_sip * months, 2)
    growth = (1 + rate) ** months
    return round(monthly_sip * ((growth - 1) / rate) * (1 + rate), 2)


def months_to_target(
    target_amount: float,
    monthly_sip: float,
    annual_rate_percent: float,
    existing_corpus: float = 0.0,
) -> int:
    """Months until SIP plus the growing existing corpus reach the target, capped."""
    if target_amount <= 0 or monthly_sip <= 0 or annual_rate_percent < 0:
        return 0
    if existing_corpus >= target_amount:
        return 0
    rate = _monthly_rate(annual_rate_percent)
    if rate == 0:
        remaining = target_amount - existing_corpus
        return min(MAX_PROJECTION_MONTHS, math.ceil(remaining / monthly_sip))

    for months in range(1, MAX_PROJECTION_MONTHS + 1):
        growth = (1 + rate) ** months
        total = existing_corpus * growth + monthly_sip * ((growth - 1) / rate) * (1 + rate)
        if total >= target_amount:
            return months
    return MAX_PROJECTION_MONTHS


def corpus_with_step_up(
    monthly_sip: float,
    annual_rate_percent: float,
    step_up_percent: float,
    months: int,
    existing_corpus: float = 0.0,
) -> Projection:
    """Month-by-month simulation with the SIP raised once a year."""
    if monthly_sip <= 0 or annual_rate_percent < 0 or step_up_percent < 0 or months <= 0:
        return Projection(corpus=round(max(0.0, existing_corpus), 2), months=0)
    rate = _monthly_rate(annual_rate_percent)
    step_up = step_up_percent / 100.0
    months = min(months, MAX_PROJECTION_MONTHS)

    corpus = existing_corpus
    sip = monthly_sip
    for month in range(months):
        if month and month % 12 == 0:
            sip *= 1 + step_up
        corpus = (corpus + sip) * (1 + rate)
    return Projection(corpus=round(corpus, 2), months=months)
