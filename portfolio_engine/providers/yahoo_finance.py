"""Yahoo Finance chart adapter for quotes and FX rates."""

from __future__ import annotations

import time
from urllib.parse import quote_plus

from portfolio_engine.providers.http import ProviderError, fetch_json
from portfolio_engine.providers.models import Quote, is_currency_code
from portfolio_engine.providers.symbols import to_yahoo_symbol

YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart"
# Minor-unit listings Yahoo reports in hundredths of the major currency.
MINOR_UNIT_CURRENCIES: dict[str, str] = {"GBp": "GBP", "GBX": "GBP", "ZAc": "ZAR", "ILA": "ILS"}


def _chart_meta(data: object) -> dict:
    chart = data.get("chart") if isinstance(data, dict) else None
    results = chart.get("result") if isinstance(chart, dict) else None
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        raise ProviderError("yahoo", "BAD_RESPONSE", "Yahoo chart response has no result.")
    meta = results[0].get("meta")
    if not isinstance(meta, dict):
        raise ProviderError("yahoo", "BAD_RESPONSE", "Yahoo chart response has no meta block.")
    return meta


class YahooFinanceClient:
    def __init__(self, timeout_seconds: float = 10.0, user_agent: str | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self.headers = {"User-Agent": user_agent} if user_agent else None

    def _chart(self, yahoo_symbol: str) -> dict:
        url = f"{YAHOO_CHART_URL}/{quote_plus(yahoo_symbol)}"
        data = fetch_json(url, provider="yahoo", timeout_seconds=self.timeout_seconds, headers=self.headers)
        return _chart_meta(data)

    def get_quote(self, symbol: str, exchange: str) -> Quote | None:
        meta = self._chart(to_yahoo_symbol(symbol, exchange))
        price = meta.get("regularMarketPrice")
        if not isinstance(price, (int, float)) or isinstance(price, bool) or price <= 0:
            return None
        currency = meta.get("currency") if isinstance(meta.get("currency"), str) else "USD"
        value = float(price)
        if currency in MINOR_UNIT_CURRENCIES:
            value = value / 100.0
            currency = MINOR_UNIT_CURRENCIES[currency]
        currency = currency.upper()
        if not is_currency_code(currency):
            raise ProviderError("yahoo", "BAD_RESPONSE", f"Yahoo chart reported an invalid currency {currency!r}.")
        return Quote(
            symbol=symbol,
            exchange=exchange,
            price=value,
            currency=currency,
            fetched_at=time.time(),
            source="yahoo",
        )

    def get_fx_rate(self, base: str, quote: str) -> float | None:
        meta = self._chart(f"{base.upper()}{quote.upper()}=X")
        rate = meta.get("regularMarketPrice")
        if not isinstance(rate, (int, float)) or isinstance(rate, bool):
            raise ProviderError("yahoo", "BAD_RESPONSE", "Yahoo chart meta is missing regularMarketPrice.")
        if rate <= 0:
            return None
        return float(rate)
