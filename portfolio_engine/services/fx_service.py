"""Home-currency FX rate lookup through the primary/secondary provider chain."""

from __future__ import annotations

import logging

from portfolio_engine.providers.models import FxRateResult, FxSource
from portfolio_engine.services.base import ServiceContext, validate_currency
from portfolio_engine.services.fallback_manager import FallbackManager, ProviderAttempt

LOGGER = logging.getLogger(__name__)
FX_ROLES: tuple[FxSource, ...] = ("primary", "secondary")


class FxService:
    def __init__(self, ctx: ServiceContext) -> None:
        self.ctx = ctx
        self.fallback_manager = FallbackManager("All FX rate providers failed.")

    def fetch_rate(self, base: str, quote: str) -> FxRateResult:
        base = validate_currency(base)
        quote = validate_currency(quote)
        if base == quote:
            return FxRateResult(success=True, rate=1.0, source="primary", provider="identity")

        providers = self.ctx.fx_providers()[: len(FX_ROLES)]
        attempts = [
            ProviderAttempt(role, name, lambda provider=provider: provider.get_fx_rate(base, quote))
            for role, (name, provider) in zip(FX_ROLES, providers)
        ]
        result = self.fallback_manager.execute("get_fx_rate", f"{base}/{quote}", attempts)
        if result.data is None:
            message = result.error.message if result.error else "FX rate unavailable."
            LOGGER.warning("fx rate unavailable: pair=%s/%s error=%s", base, quote, message)
            return FxRateResult(success=False, rate=None, source=None, error=message)
        if result.source == "secondary":
            LOGGER.info("fx rate served by secondary provider: pair=%s/%s provider=%s", base, quote, result.data_provider)
        return FxRateResult(
            success=True,
            rate=float(result.data),
            source=result.source,  # type: ignore[arg-type]
            provider=result.data_provider,
        )

    def fetch_home_currency_rate(self) -> FxRateResult:
        settings = self.ctx.settings
        return self.fetch_rate(settings.fx_base_currency, settings.home_currency)
