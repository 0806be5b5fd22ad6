"""ExchangeRate-API open-access adapter (flat rates map)."""

from __future__ import annotations

from urllib.parse import quote_plus

from portfolio_engine.providers.http import ProviderError, fetch_json

EXCHANGERATE_API_URL = "https://open.er-api.com/v6/latest"


class ExchangeRateApiClient:
    def __init__(self, timeout_seconds: float = 10.0) -> None:
        self.timeout_seconds = timeout_seconds

    def get_fx_rate(self, base: str, quote: str) -> float | None:
        url = f"{EXCHANGERATE_API_URL}/{quote_plus(base.upper())}"
        data = fetch_json(url, provider="exchangerate-api", timeout_seconds=self.timeout_seconds)
        if not isinstance(data, dict) or data.get("result") != "success":
            message = data.get("error-type") if isinstance(data, dict) else None
            raise ProviderError(
                "exchangerate-api",
                "BAD_RESPONSE",
                f"ExchangeRate-API returned an unsuccessful result ({message or 'unknown'}).",
            )
        rates = data.get("rates")
        rate = rates.get(quote.upper()) if isinstance(rates, dict) else None
        if not isinstance(rate, (int, float)) or isinstance(rate, bool):
            raise ProviderError("exchangerate-api", "BAD_RESPONSE", f"ExchangeRate-API has no rate for {quote.upper()}.")
        if rate <= 0:
            return None
        return float(rate)
