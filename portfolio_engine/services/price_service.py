"""Batch price resolution with home-currency normalization."""

from __future__ import annotations

import asyncio
import logging
import time

from portfolio_engine.providers.models import FxRateResult, PriceBatchResult, Quote, ResolvedPrice, is_currency_code
from portfolio_engine.providers.symbols import UnsupportedExchangeError, normalize_exchange
from portfolio_engine.runtime.monitoring import log_engine_event
from portfolio_engine.services.base import ServiceContext, ServiceResult
from portfolio_engine.services.fallback_manager import FallbackManager, ProviderAttempt
from portfolio_engine.services.fx_service import FxService

LOGGER = logging.getLogger(__name__)


class PriceService:
    def __init__(self, ctx: ServiceContext, fx_service: FxService | None = None) -> None:
        self.ctx = ctx
        self.fx_service = fx_service or FxService(ctx)
        self.fallback_manager = FallbackManager("All quote providers failed.")

    @property
    def home_currency(self) -> str:
        return self.ctx.settings.home_currency

    def _quote_chain(self, symbol: str, exchange: str) -> ServiceResult[Quote]:
        attempts = [
            ProviderAttempt(name, name, lambda provider=provider: provider.get_quote(symbol, exchange))
            for name, provider in self.ctx.quote_providers()
        ]
        return self.fallback_manager.execute("get_quote", f"{symbol}:{exchange}", attempts)

    async def _resolve_quote(
        self,
        symbol: str,
        exchange: str,
        semaphore: asyncio.Semaphore,
    ) -> tuple[Quote | None, str | None]:
        try:
            exchange = normalize_exchange(exchange)
        except UnsupportedExchangeError as error:
            return None, str(error)

        timeout = self.ctx.settings.quote_timeout_seconds
        async with semaphore:
            try:
                result = await asyncio.wait_for(asyncio.to_thread(self._quote_chain, symbol, exchange), timeout)
            except asyncio.TimeoutError:
                LOGGER.warning("quote timed out: symbol=%s exchange=%s timeout_s=%s", symbol, exchange, timeout)
                return None, f"Quote lookup timed out after {timeout}s."
        if result.data is None:
            return None, result.error.message if result.error else "No quote available."
        if not is_currency_code(result.data.currency):
            LOGGER.warning(
                "quote rejected, invalid currency: symbol=%s provider=%s currency=%r",
                symbol,
                result.data_provider,
                result.data.currency,
            )
            return None, f"Quote currency {result.data.currency!r} is not a three-letter ISO code."
        return result.data, None

    async def _resolve_rates(self, currencies: set[str]) -> dict[str, FxRateResult]:
        if not currencies:
            return {}
        ordered = sorted(currencies)
        timeout = self.ctx.settings.quote_timeout_seconds

        async def _one(currency: str) -> FxRateResult:
            try:
                return await asyncio.wait_for(
                    asyncio.to_thread(self.fx_service.fetch_rate, currency, self.home_currency),
                    timeout,
                )
            except asyncio.TimeoutError:
                return FxRateResult(success=False, error=f"FX lookup timed out after {timeout}s.")
            except ValueError as error:
                return FxRateResult(success=False, error=str(error))

        results = await asyncio.gather(*(_one(currency) for currency in ordered))
        return dict(zip(ordered, results))

    def _normalize(self, quote: Quote, rates: dict[str, FxRateResult]) -> ResolvedPrice:
        if quote.currency == self.home_currency:
            return ResolvedPrice(price=quote.price, currency=quote.currency, source=quote.source)
        fx = rates.get(quote.currency)
        if fx is None or not fx.success or fx.rate is None:
            LOGGER.warning(
                "fx conversion unavailable, keeping listing currency: symbol=%s currency=%s",
                quote.symbol,
                quote.currency,
            )
            return ResolvedPrice(
                price=quote.price,
                currency=quote.currency,
                source=quote.source,
                error=fx.error if fx else None,
            )
        return ResolvedPrice(
            price=quote.price * fx.rate,
            currency=self.home_currency,
            original_price=quote.price,
            original_currency=quote.currency,
            exchange_rate=fx.rate,
            source=quote.source,
        )

    async def fetch_prices(self, symbols: list[str], exchanges: list[str]) -> PriceBatchResult:
        if len(symbols) != len(exchanges):
            raise ValueError("symbols and exchanges must have the same length.")

        started = time.perf_counter()
        pairs: dict[str, str] = {}
        for symbol, exchange in zip(symbols, exchanges):
            if not isinstance(symbol, str) or not symbol.strip():
                continue
            if not isinstance(exchange, str) or not exchange.strip():
                continue
            pairs.setdefault(symbol.strip(), exchange.strip())

        if not pairs:
            return PriceBatchResult(success=True, prices={}, fetched_at=time.time())

        semaphore = asyncio.Semaphore(max(1, self.ctx.settings.quote_max_concurrency))
        keys = list(pairs)
        resolved = await asyncio.gather(*(self._resolve_quote(key, pairs[key], semaphore) for key in keys))
        foreign = {quote.currency for quote, _ in resolved if quote and quote.currency != self.home_currency}
        rates = await self._resolve_rates(foreign)

        prices: dict[str, ResolvedPrice] = {}
        for key, (quote, error) in zip(keys, resolved):
            if quote is None:
                prices[key] = ResolvedPrice(price=None, currency=self.home_currency, error=error)
                continue
            prices[key] = self._normalize(quote, rates)

        failed = sum(1 for item in prices.values() if item.price is None)
        success = failed < len(prices)
        error = None if success else "No prices could be resolved for the requested symbols."
        log_engine_event(
            "fetch_prices",
            (time.perf_counter() - started) * 1000,
            success,
            requested=len(prices),
            failed=failed,
            fx_currencies=sorted(foreign),
        )
        return PriceBatchResult(success=success, prices=prices, error=error, fetched_at=time.time())

    async def fetch_price(self, symbol: str, exchange: str) -> ResolvedPrice:
        batch = await self.fetch_prices([symbol], [exchange])
        return batch.prices.get(symbol.strip(), ResolvedPrice(price=None, currency=self.home_currency))
