"""Google Finance quote-page fallback for last-resort price lookups."""

from __future__ import annotations

import re
import time
from urllib.parse import quote

from portfolio_engine.providers.http import ProviderError, fetch_text
from portfolio_engine.providers.models import Quote, is_currency_code
from portfolio_engine.providers.symbols import listing_currency, to_google_symbol

GOOGLE_FINANCE_URL = "https://www.google.com/finance/quote"
PRICE_PATTERNS = (
    re.compile(r'data-last-price="([^"]+)"'),
    re.compile(r'"price":\s*"([^"]+)"'),
    re.compile(r'"currentPrice":\s*"([^"]+)"'),
)
CURRENCY_PATTERN = re.compile(r'data-currency-code="([^"]*)"')


def parse_last_price(html: str) -> float | None:
    for pattern in PRICE_PATTERNS:
        match = pattern.search(html)
        if not match:
            continue
        try:
            value = float(match.group(1).replace(",", ""))
        except ValueError:
            continue
        if value > 0:
            return value
    return None


class GoogleFinanceClient:
    """Scrapes the public quote page when the JSON providers fail."""

    def __init__(self, timeout_seconds: float = 10.0, user_agent: str | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self.headers = {"User-Agent": user_agent} if user_agent else None

    def get_quote(self, symbol: str, exchange: str) -> Quote | None:
        url = f"{GOOGLE_FINANCE_URL}/{quote(to_google_symbol(symbol, exchange))}"
        html = fetch_text(url, provider="googlefinance", timeout_seconds=self.timeout_seconds, headers=self.headers)
        price = parse_last_price(html)
        if price is None:
            return None
        currency_match = CURRENCY_PATTERN.search(html)
        currency = currency_match.group(1).strip().upper() if currency_match else listing_currency(exchange)
        if not is_currency_code(currency):
            raise ProviderError("googlefinance", "BAD_RESPONSE", f"Quote page reported an invalid currency {currency!r}.")
        return Quote(
            symbol=symbol,
            exchange=exchange,
            price=price,
            currency=currency,
            fetched_at=time.time(),
            source="googlefinance",
        )
