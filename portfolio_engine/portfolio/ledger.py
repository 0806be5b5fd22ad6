"""Cash-flow series construction from ledger transactions."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Mapping

from portfolio_engine.portfolio.models import CashFlow, Transaction, XirrResult
from portfolio_engine.portfolio.xirr import compute_xirr

OUTFLOW_KINDS = {
    "purchase",
    "buy",
    "sip",
    "systematic investment",
    "switch in",
    "switch-in",
    "stp in",
    "additional purchase",
    "contribution",
}
INFLOW_KINDS = {
    "redemption",
    "sell",
    "switch out",
    "switch-out",
    "stp out",
    "swp",
    "dividend payout",
    "idcw payout",
    "withdrawal",
}


def signed_amount(amount: float, kind: str | None) -> float:
    """Apply the outflow-negative / inflow-positive convention for a ledger kind."""
    normalized = (kind or "").strip().lower()
    if normalized in OUTFLOW_KINDS:
        return -abs(amount)
    if normalized in INFLOW_KINDS:
        return abs(amount)
    return amount


def valuation_point(as_of: date, current_value: float) -> CashFlow:
    return CashFlow(date=as_of, amount=float(current_value))


def build_cash_flow_series(
    transactions: Iterable[Transaction],
    current_value: float,
    as_of: date,
) -> list[CashFlow]:
    """Net same-day flows, sort ascending and close with the valuation point."""
    totals: dict[date, float] = defaultdict(float)
    for tx in transactions:
        if tx.date > as_of:
            raise ValueError(f"Transaction dated {tx.date.isoformat()} is after the as-of date {as_of.isoformat()}.")
        totals[tx.date] += float(tx.amount)
    totals[as_of] += float(current_value)
    return [CashFlow(date=day, amount=totals[day]) for day in sorted(totals)]


def portfolio_xirr(
    transactions: Iterable[Transaction],
    current_value: float,
    as_of: date,
) -> XirrResult:
    return compute_xirr(build_cash_flow_series(transactions, current_value, as_of))


def scheme_xirr(
    transactions: Iterable[Transaction],
    current_value: float,
    as_of: date,
) -> XirrResult:
    """XIRR for a single folio + scheme holding."""
    return portfolio_xirr(transactions, current_value, as_of)


def scheme_key(scheme_name: str, folio: str) -> str:
    return f"{scheme_name}-{folio}"


def goal_xirr(
    mappings: Iterable[Mapping[str, str]],
    scheme_transactions: Mapping[str, list[Transaction]],
    scheme_values: Mapping[str, float],
    as_of: date,
) -> XirrResult:
    """Pool the cash flows of every scheme mapped to a goal into one series.

    Only schemes with a positive current value contribute to the terminal
    valuation; fully redeemed schemes still contribute their history.
    """
    pooled: list[Transaction] = []
    terminal = 0.0
    for mapping in mappings:
        key = scheme_key(mapping["scheme_name"], mapping["folio"])
        pooled.extend(scheme_transactions.get(key, []))
        value = float(scheme_values.get(key, 0.0) or 0.0)
        if value > 0:
            terminal += value
    return portfolio_xirr(pooled, terminal, as_of)
