"""Shared service orchestration helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar, runtime_checkable

from portfolio_engine.config.settings import Settings
from portfolio_engine.providers.http import ProviderError
from portfolio_engine.providers.models import Quote, is_currency_code

DEFAULT_QUOTE_ORDER = ("yahoo", "googlefinance")
DEFAULT_FX_ORDER = ("yahoo", "exchangerate-api")
T = TypeVar("T")


@runtime_checkable
class QuoteProvider(Protocol):
    def get_quote(self, symbol: str, exchange: str) -> Quote | None: ...


@runtime_checkable
class FxProvider(Protocol):
    def get_fx_rate(self, base: str, quote: str) -> float | None: ...


@dataclass
class ErrorEnvelope:
    code: str
    message: str
    retriable: bool = True
    provider: str | None = None


@dataclass
class ServiceResult(Generic[T]):
    data: T | None
    source: str | None = None
    warning: str | None = None
    error: ErrorEnvelope | None = None
    fetched_at: float | None = None
    data_provider: str | None = None


@dataclass
class ServiceContext:
    """Explicit provider handles injected into every entry point."""

    providers: dict[str, object]
    settings: Settings = field(default_factory=Settings)
    quote_order: tuple[str, ...] = DEFAULT_QUOTE_ORDER
    fx_order: tuple[str, ...] = DEFAULT_FX_ORDER

    def get_provider(self, name: str) -> object | None:
        return self.providers.get(name)

    def quote_providers(self) -> list[tuple[str, QuoteProvider]]:
        out: list[tuple[str, QuoteProvider]] = []
        for name in self.quote_order:
            provider = self.get_provider(name)
            if isinstance(provider, QuoteProvider):
                out.append((name, provider))
        return out

    def fx_providers(self) -> list[tuple[str, FxProvider]]:
        out: list[tuple[str, FxProvider]] = []
        for name in self.fx_order:
            provider = self.get_provider(name)
            if isinstance(provider, FxProvider):
                out.append((name, provider))
        return out


def validate_currency(code: str) -> str:
    clean = (code or "").strip().upper()
    if not is_currency_code(clean):
        raise ValueError("Currency must be a three-letter ISO code.")
    return clean


def envelope_from_provider_error(error: ProviderError) -> ErrorEnvelope:
    retriable = error.code in {"RATE_LIMIT", "NETWORK", "TIMEOUT", "UPSTREAM", "BAD_RESPONSE"}
    return ErrorEnvelope(code=error.code, message=error.message, retriable=retriable, provider=error.provider)
