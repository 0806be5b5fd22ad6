import pytest

from portfolio_engine.providers.symbols import (
    UnsupportedExchangeError,
    listing_currency,
    normalize_exchange,
    to_google_symbol,
    to_yahoo_symbol,
)


@pytest.mark.parametrize(
    ("symbol", "exchange", "expected"),
    [
        ("RELIANCE", "NSE", "RELIANCE.NS"),
        ("RELIANCE", " nse ", "RELIANCE.NS"),
        ("RELIANCE.NS", "NSE", "RELIANCE.NS"),
        ("500325", "BSE", "500325.BO"),
        ("AAPL", "NASDAQ", "AAPL"),
        ("AAPL", "US", "AAPL"),
        ("VOD", "LSE", "VOD.L"),
        ("7203", "TSE", "7203.T"),
    ],
)
def test_to_yahoo_symbol(symbol: str, exchange: str, expected: str) -> None:
    assert to_yahoo_symbol(symbol, exchange) == expected


def test_to_google_symbol_uses_market_codes() -> None:
    assert to_google_symbol("AAPL", "US") == "AAPL:NASDAQ"
    assert to_google_symbol("INFY", "NSE") == "INFY:NSE"
    assert to_google_symbol("RELIANCE.BO", "BSE") == "RELIANCE:BOM"


def test_unsupported_exchange_is_a_value_error() -> None:
    with pytest.raises(UnsupportedExchangeError) as excinfo:
        normalize_exchange("MOON")
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.exchange == "MOON"
    with pytest.raises(ValueError):
        to_yahoo_symbol("X", "")


def test_listing_currency() -> None:
    assert listing_currency("lse") == "GBP"
    assert listing_currency("NSE") == "INR"
    assert listing_currency("NYSE") == "USD"
