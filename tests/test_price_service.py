import asyncio
import time

import pytest

from portfolio_engine.config.settings import Settings
from portfolio_engine.providers.http import ProviderError
from portfolio_engine.providers.models import Quote
from portfolio_engine.services.base import ServiceContext
from portfolio_engine.services.price_service import PriceService


class FakeQuoteProvider:
    def __init__(self, source: str, prices: dict[str, tuple[float, str]], delay: float = 0.0) -> None:
        self.source = source
        self.prices = prices
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    def get_quote(self, symbol: str, exchange: str) -> Quote | None:
        self.calls.append((symbol, exchange))
        if self.delay:
            time.sleep(self.delay)
        if symbol == "BROKEN":
            raise ProviderError(self.source, "UPSTREAM", "Provider request failed with status 500.", 500)
        if symbol not in self.prices:
            return None
        price, currency = self.prices[symbol]
        return Quote(symbol, exchange, price, currency, time.time(), self.source)  # type: ignore[arg-type]


class FakeFxProvider:
    def __init__(self, rates: dict[tuple[str, str], float]) -> None:
        self.rates = rates
        self.calls: list[tuple[str, str]] = []

    def get_fx_rate(self, base: str, quote: str) -> float | None:
        self.calls.append((base, quote))
        if (base, quote) not in self.rates:
            raise ProviderError("exchangerate-api", "BAD_RESPONSE", f"No rate for {quote}.")
        return self.rates[(base, quote)]


def _ctx(yahoo=None, google=None, fx=None, settings: Settings | None = None) -> ServiceContext:
    providers = {"yahoo": yahoo, "googlefinance": google, "exchangerate-api": fx}
    return ServiceContext(
        providers={name: provider for name, provider in providers.items() if provider is not None},
        settings=settings or Settings(),
    )


def test_home_currency_quote_passes_through() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"INFY": (1500.0, "INR")})
    batch = asyncio.run(PriceService(_ctx(yahoo=yahoo)).fetch_prices(["INFY"], ["NSE"]))
    assert batch.success is True
    price = batch.prices["INFY"]
    assert (price.price, price.currency, price.source) == (1500.0, "INR", "yahoo")
    assert price.original_price is None
    assert price.exchange_rate is None
    assert batch.resolved() == {"INFY": 1500.0}


def test_foreign_quote_is_converted_with_original_fields() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"AAPL": (100.0, "USD"), "MSFT": (400.0, "USD")})
    fx = FakeFxProvider({("USD", "INR"): 83.0})
    batch = asyncio.run(PriceService(_ctx(yahoo=yahoo, fx=fx)).fetch_prices(["AAPL", "MSFT"], ["US", "NASDAQ"]))

    apple = batch.prices["AAPL"]
    assert apple.price == pytest.approx(8300.0)
    assert apple.currency == "INR"
    assert apple.original_price == 100.0
    assert apple.original_currency == "USD"
    assert apple.exchange_rate == 83.0
    assert fx.calls == [("USD", "INR")]


def test_one_failing_symbol_does_not_fail_the_batch() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"INFY": (1500.0, "INR")})
    batch = asyncio.run(
        PriceService(_ctx(yahoo=yahoo)).fetch_prices(["INFY", "BROKEN", "TCS"], ["NSE", "NSE", "MOON"])
    )
    assert batch.success is True
    assert batch.prices["INFY"].price == 1500.0
    assert batch.prices["BROKEN"].price is None
    assert "All quote providers failed." in (batch.prices["BROKEN"].error or "")
    assert batch.prices["TCS"].price is None
    assert "Unsupported exchange" in (batch.prices["TCS"].error or "")
    assert ("TCS", "MOON") not in yahoo.calls


def test_secondary_quote_provider_is_used_when_primary_has_nothing() -> None:
    yahoo = FakeQuoteProvider("yahoo", {})
    google = FakeQuoteProvider("googlefinance", {"HDFCBANK": (1650.0, "INR")})
    batch = asyncio.run(PriceService(_ctx(yahoo=yahoo, google=google)).fetch_prices(["HDFCBANK"], ["BSE"]))
    assert batch.prices["HDFCBANK"].price == 1650.0
    assert batch.prices["HDFCBANK"].source == "googlefinance"
    assert yahoo.calls == [("HDFCBANK", "BSE")]


def test_all_failures_mark_batch_unsuccessful() -> None:
    yahoo = FakeQuoteProvider("yahoo", {})
    batch = asyncio.run(PriceService(_ctx(yahoo=yahoo)).fetch_prices(["A", "B"], ["NSE", "NSE"]))
    assert batch.success is False
    assert batch.error is not None
    assert set(batch.prices) == {"A", "B"}
    assert all(item.price is None for item in batch.prices.values())


def test_fx_failure_keeps_listing_currency_price() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"VOD": (72.5, "GBP")})
    fx = FakeFxProvider({})
    batch = asyncio.run(PriceService(_ctx(yahoo=yahoo, fx=fx)).fetch_prices(["VOD"], ["LSE"]))
    vodafone = batch.prices["VOD"]
    assert vodafone.price == 72.5
    assert vodafone.currency == "GBP"
    assert vodafone.exchange_rate is None
    assert vodafone.error is not None


def test_length_mismatch_is_a_contract_violation() -> None:
    service = PriceService(_ctx())
    with pytest.raises(ValueError, match="same length"):
        asyncio.run(service.fetch_prices(["A", "B"], ["NSE"]))


def test_blank_and_duplicate_symbols_are_skipped() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"INFY": (1500.0, "INR")})
    batch = asyncio.run(
        PriceService(_ctx(yahoo=yahoo)).fetch_prices(["INFY", " INFY ", "", "TCS"], ["NSE", "NSE", "NSE", ""])
    )
    assert list(batch.prices) == ["INFY"]
    assert yahoo.calls == [("INFY", "NSE")]


def test_empty_request_succeeds_with_no_prices() -> None:
    batch = asyncio.run(PriceService(_ctx()).fetch_prices([], []))
    assert batch.success is True
    assert batch.prices == {}


def test_slow_provider_times_out_per_symbol() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"SLOW": (10.0, "INR")}, delay=0.5)
    ctx = _ctx(yahoo=yahoo, settings=Settings(quote_timeout_seconds=0.05))
    batch = asyncio.run(PriceService(ctx).fetch_prices(["SLOW"], ["NSE"]))
    assert batch.success is False
    assert "timed out" in (batch.prices["SLOW"].error or "")


def test_fetch_price_returns_single_resolution() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"INFY": (1500.0, "INR")})
    price = asyncio.run(PriceService(_ctx(yahoo=yahoo)).fetch_price("INFY", "nse"))
    assert price.price == 1500.0


def test_non_iso_quote_currency_fails_only_that_symbol() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"INFY": (1500.0, "INR"), "BTC": (1.0, "USDT")})
    fx = FakeFxProvider({("USD", "INR"): 83.0})
    batch = asyncio.run(PriceService(_ctx(yahoo=yahoo, fx=fx)).fetch_prices(["INFY", "BTC"], ["NSE", "US"]))

    assert batch.success is True
    assert batch.prices["INFY"].price == 1500.0
    assert batch.prices["BTC"].price is None
    assert "three-letter ISO code" in (batch.prices["BTC"].error or "")
    assert fx.calls == []


def test_invalid_currency_pair_during_conversion_is_contained() -> None:
    yahoo = FakeQuoteProvider("yahoo", {"INFY": (1500.0, "INR")})
    fx = FakeFxProvider({})
    ctx = _ctx(yahoo=yahoo, fx=fx, settings=Settings(home_currency="RUPEE"))
    batch = asyncio.run(PriceService(ctx).fetch_prices(["INFY"], ["NSE"]))

    infy = batch.prices["INFY"]
    assert batch.success is True
    assert (infy.price, infy.currency) == (1500.0, "INR")
    assert infy.exchange_rate is None
    assert "three-letter ISO code" in (infy.error or "")
