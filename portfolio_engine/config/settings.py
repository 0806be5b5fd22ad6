"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Runtime settings for providers, solver-independent policy and logging."""

    app_name: str = "portfolio-analytics-engine"
    app_version: str = "1.0.0"
    home_currency: str = "INR"
    fx_base_currency: str = "USD"
    request_timeout_seconds: float = 10.0
    quote_timeout_seconds: float = 15.0
    quote_max_concurrency: int = 8
    yahoo_finance_enabled: bool = True
    google_finance_enabled: bool = True
    exchangerate_api_enabled: bool = True
    http_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    )
    risk_equity_high_threshold: float = 60.0
    risk_debt_low_threshold: float = 60.0
    diversification_min_buckets: int = 3
    diversification_max_concentration: float = 70.0
    rebalance_equity_threshold: float = 80.0
    rebalance_debt_threshold: float = 80.0
    inflation_rate_percent: float = 6.0
    log_level: str = "INFO"


def _as_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_currency(value: str | None, default: str) -> str:
    if value is None or not value.strip():
        return default
    return value.strip().upper()


def get_settings() -> Settings:
    """Load runtime settings from environment variables."""
    load_dotenv()
    defaults = Settings()

    return Settings(
        home_currency=_as_currency(os.getenv("HOME_CURRENCY"), defaults.home_currency),
        fx_base_currency=_as_currency(os.getenv("FX_BASE_CURRENCY"), defaults.fx_base_currency),
        request_timeout_seconds=_as_float(os.getenv("REQUEST_TIMEOUT_SECONDS"), defaults.request_timeout_seconds),
        quote_timeout_seconds=_as_float(os.getenv("QUOTE_TIMEOUT_SECONDS"), defaults.quote_timeout_seconds),
        quote_max_concurrency=max(1, _as_int(os.getenv("QUOTE_MAX_CONCURRENCY"), defaults.quote_max_concurrency)),
        yahoo_finance_enabled=_as_bool(os.getenv("YAHOO_FINANCE_ENABLED"), True),
        google_finance_enabled=_as_bool(os.getenv("GOOGLE_FINANCE_ENABLED"), True),
        exchangerate_api_enabled=_as_bool(os.getenv("EXCHANGERATE_API_ENABLED"), True),
        http_user_agent=os.getenv("HTTP_USER_AGENT") or defaults.http_user_agent,
        risk_equity_high_threshold=_as_float(
            os.getenv("RISK_EQUITY_HIGH_THRESHOLD"), defaults.risk_equity_high_threshold
        ),
        risk_debt_low_threshold=_as_float(os.getenv("RISK_DEBT_LOW_THRESHOLD"), defaults.risk_debt_low_threshold),
        diversification_min_buckets=_as_int(
            os.getenv("DIVERSIFICATION_MIN_BUCKETS"), defaults.diversification_min_buckets
        ),
        diversification_max_concentration=_as_float(
            os.getenv("DIVERSIFICATION_MAX_CONCENTRATION"), defaults.diversification_max_concentration
        ),
        rebalance_equity_threshold=_as_float(
            os.getenv("REBALANCE_EQUITY_THRESHOLD"), defaults.rebalance_equity_threshold
        ),
        rebalance_debt_threshold=_as_float(os.getenv("REBALANCE_DEBT_THRESHOLD"), defaults.rebalance_debt_threshold),
        inflation_rate_percent=_as_float(os.getenv("INFLATION_RATE_PERCENT"), defaults.inflation_rate_percent),
        log_level=(os.getenv("LOG_LEVEL") or defaults.log_level).strip().upper(),
    )
