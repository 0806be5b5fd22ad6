from portfolio_engine.providers.exchange_rate_api import ExchangeRateApiClient
from portfolio_engine.providers.google_finance import GoogleFinanceClient
from portfolio_engine.providers.http import ProviderError
from portfolio_engine.providers.yahoo_finance import YahooFinanceClient

__all__ = [
    "ExchangeRateApiClient",
    "GoogleFinanceClient",
    "ProviderError",
    "YahooFinanceClient",
]
