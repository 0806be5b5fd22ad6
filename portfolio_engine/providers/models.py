"""Normalized data models shared across quote and FX providers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

ProviderName = Literal[
    "yahoo",
    "googlefinance",
    "exchangerate-api",
]
FxSource = Literal["primary", "secondary"]
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


def is_currency_code(code: object) -> bool:
    return isinstance(code, str) and CURRENCY_PATTERN.match(code) is not None


@dataclass(frozen=True)
class Quote:
    symbol: str
    exchange: str
    price: float
    currency: str
    fetched_at: float
    source: ProviderName


@dataclass(frozen=True)
class FxRate:
    pair: str
    rate: float
    source: FxSource


@dataclass
class FxRateResult:
    success: bool
    rate: float | None = None
    source: FxSource | None = None
    error: str | None = None
    provider: str | None = None

    def as_fx_rate(self, base: str, quote: str) -> FxRate | None:
        if not self.success or self.rate is None or self.source is None:
            return None
        return FxRate(pair=f"{base}/{quote}", rate=self.rate, source=self.source)


@dataclass
class ResolvedPrice:
    price: float | None
    currency: str
    original_price: float | None = None
    original_currency: str | None = None
    exchange_rate: float | None = None
    source: str | None = None
    error: str | None = None


@dataclass
class PriceBatchResult:
    success: bool
    prices: dict[str, ResolvedPrice] = field(default_factory=dict)
    error: str | None = None
    fetched_at: float | None = None

    def resolved(self) -> dict[str, float]:
        return {symbol: item.price for symbol, item in self.prices.items() if item.price is not None}
