"""Typed portfolio models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

Category = Literal["Equity", "Debt", "Hybrid", "Other"]
CATEGORIES: tuple[Category, ...] = ("Equity", "Debt", "Hybrid", "Other")


@dataclass(frozen=True)
class Transaction:
    date: date
    amount: float
    currency: str = "INR"
    kind: str | None = None


@dataclass(frozen=True)
class CashFlow:
    date: date
    amount: float


@dataclass
class XirrResult:
    rate: float | None
    converged: bool
    error: str | None = None
    iterations: int = 0

    @property
    def percentage(self) -> float | None:
        return self.rate * 100.0 if self.rate is not None else None


@dataclass(frozen=True)
class Holding:
    name: str
    category: Category
    quantity: float
    price: float | None
    currency: str = "INR"
    symbol: str | None = None
    exchange: str | None = None


@dataclass(frozen=True)
class ValuedHolding:
    name: str
    category: Category
    quantity: float
    price: float | None
    currency: str
    value: float | None


@dataclass
class AllocationBucket:
    category: Category
    total_value: float
    percentage_of_portfolio: float
    holding_count: int

    def display_percentage(self, decimals: int = 2) -> float:
        return round(self.percentage_of_portfolio, decimals)


@dataclass
class Classification:
    buckets: list[AllocationBucket] = field(default_factory=list)
    risk_profile: str = "Not available"
    diversification_score: str = "No portfolio data"
    rebalancing_suggestion: str | None = None

    def percentage_of(self, category: Category) -> float:
        for bucket in self.buckets:
            if bucket.category == category:
                return bucket.percentage_of_portfolio
        return 0.0


@dataclass
class ValidationIssue:
    field: str
    message: str
    row: int | None = None
    code: str = "invalid_value"
