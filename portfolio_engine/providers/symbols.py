"""Exchange tag mapping onto quote-provider symbol conventions."""

from __future__ import annotations

YAHOO_SUFFIXES: dict[str, str] = {
    "NSE": ".NS",
    "BSE": ".BO",
    "NASDAQ": "",
    "NYSE": "",
    "US": "",
    "LSE": ".L",
    "TSE": ".T",
    "ASX": ".AX",
    "TSX": ".TO",
    "HKEX": ".HK",
}

GOOGLE_MARKETS: dict[str, str] = {
    "NSE": "NSE",
    "BSE": "BOM",
    "NASDAQ": "NASDAQ",
    "NYSE": "NYSE",
    "US": "NASDAQ",
    "LSE": "LON",
    "TSE": "TYO",
    "ASX": "ASX",
    "TSX": "TSE",
    "HKEX": "HKG",
}

EXCHANGE_CURRENCIES: dict[str, str] = {
    "NSE": "INR",
    "BSE": "INR",
    "NASDAQ": "USD",
    "NYSE": "USD",
    "US": "USD",
    "LSE": "GBP",
    "TSE": "JPY",
    "ASX": "AUD",
    "TSX": "CAD",
    "HKEX": "HKD",
}


class UnsupportedExchangeError(ValueError):
    def __init__(self, exchange: str) -> None:
        self.exchange = exchange
        super().__init__(f"Unsupported exchange: {exchange!r}")


def normalize_exchange(exchange: str) -> str:
    tag = (exchange or "").strip().upper()
    if tag not in YAHOO_SUFFIXES:
        raise UnsupportedExchangeError(exchange)
    return tag


def to_yahoo_symbol(symbol: str, exchange: str) -> str:
    suffix = YAHOO_SUFFIXES[normalize_exchange(exchange)]
    clean = symbol.strip()
    if suffix and clean.endswith(suffix):
        return clean
    return f"{clean}{suffix}"


def to_google_symbol(symbol: str, exchange: str) -> str:
    market = GOOGLE_MARKETS[normalize_exchange(exchange)]
    clean = symbol.strip()
    suffix = YAHOO_SUFFIXES[normalize_exchange(exchange)]
    if suffix and clean.endswith(suffix):
        clean = clean[: -len(suffix)]
    return f"{clean}:{market}"


def listing_currency(exchange: str) -> str:
    return EXCHANGE_CURRENCIES[normalize_exchange(exchange)]
