"""Application entrypoint for the portfolio analytics engine."""

from __future__ import annotations

import asyncio
import logging

from portfolio_engine.config.settings import Settings, get_settings
from portfolio_engine.providers.exchange_rate_api import ExchangeRateApiClient
from portfolio_engine.providers.google_finance import GoogleFinanceClient
from portfolio_engine.providers.yahoo_finance import YahooFinanceClient
from portfolio_engine.runtime.monitoring import configure_logging
from portfolio_engine.services.base import ServiceContext
from portfolio_engine.services.fx_service import FxService

LOGGER = logging.getLogger(__name__)


def build_context(settings: Settings | None = None) -> ServiceContext:
    settings = settings or get_settings()
    yahoo_client = (
        YahooFinanceClient(settings.request_timeout_seconds, settings.http_user_agent)
        if settings.yahoo_finance_enabled
        else None
    )
    google_client = (
        GoogleFinanceClient(settings.request_timeout_seconds, settings.http_user_agent)
        if settings.google_finance_enabled
        else None
    )
    exchange_rate_client = (
        ExchangeRateApiClient(settings.request_timeout_seconds) if settings.exchangerate_api_enabled else None
    )
    providers = {
        "yahoo": yahoo_client,
        "googlefinance": google_client,
        "exchangerate-api": exchange_rate_client,
    }
    return ServiceContext(
        providers={name: client for name, client in providers.items() if client is not None},
        settings=settings,
    )


async def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    ctx = build_context(settings)
    LOGGER.info(
        "%s %s starting: quote_providers=%s fx_providers=%s home_currency=%s",
        settings.app_name,
        settings.app_version,
        [name for name, _ in ctx.quote_providers()],
        [name for name, _ in ctx.fx_providers()],
        settings.home_currency,
    )
    result = await asyncio.to_thread(FxService(ctx).fetch_home_currency_rate)
    if result.success:
        LOGGER.info(
            "home currency rate: pair=%s/%s rate=%s source=%s provider=%s",
            settings.fx_base_currency,
            settings.home_currency,
            result.rate,
            result.source,
            result.provider,
        )
    else:
        LOGGER.error(
            "home currency rate unavailable: pair=%s/%s error=%s",
            settings.fx_base_currency,
            settings.home_currency,
            result.error,
        )


if __name__ == "__main__":
    asyncio.run(run())
