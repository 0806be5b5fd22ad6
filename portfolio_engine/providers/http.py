"""HTTP utilities and normalized provider errors."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal

import requests
from requests.adapters import HTTPAdapter

from portfolio_engine.providers.models import ProviderName

ProviderErrorCode = Literal["RATE_LIMIT", "AUTH", "NOT_FOUND", "UPSTREAM", "NETWORK", "TIMEOUT", "BAD_RESPONSE"]

_SESSION = requests.Session()
_SESSION.mount("https://", HTTPAdapter(pool_connections=20, pool_maxsize=50))
_SESSION.mount("http://", HTTPAdapter(pool_connections=20, pool_maxsize=50))


@dataclass
class ProviderError(Exception):
    provider: ProviderName
    code: ProviderErrorCode
    message: str
    status: int | None = None

    def __str__(self) -> str:
        return self.message


def map_status_to_code(status: int) -> ProviderErrorCode:
    if status in {401, 403}:
        return "AUTH"
    if status == 404:
        return "NOT_FOUND"
    if status == 429:
        return "RATE_LIMIT"
    return "UPSTREAM"


def _get(
    url: str,
    provider: ProviderName,
    timeout_seconds: float,
    headers: dict[str, str] | None,
) -> requests.Response:
    try:
        response = _SESSION.get(url, timeout=timeout_seconds, headers=headers)
    except requests.Timeout as error:
        raise ProviderError(provider, "TIMEOUT", f"Provider request timed out after {timeout_seconds}s.") from error
    except requests.RequestException as error:
        raise ProviderError(provider, "NETWORK", "Provider request failed due to network error.") from error

    if not response.ok:
        raise ProviderError(
            provider,
            map_status_to_code(response.status_code),
            f"Provider request failed with status {response.status_code}.",
            response.status_code,
        )
    return response


def fetch_json(
    url: str,
    provider: ProviderName,
    timeout_seconds: float = 10.0,
    headers: dict[str, str] | None = None,
) -> Any:
    """Fetch JSON with uniform provider/network error mapping.

    A single attempt is made; callers that need a second source go through
    the fallback manager instead of retrying the same endpoint.
    """
    response = _get(url, provider, timeout_seconds, headers)
    raw = response.text or ""
    if not raw:
        raise ProviderError(provider, "BAD_RESPONSE", "Provider returned an empty body.", response.status_code)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as error:
        raise ProviderError(
            provider,
            "BAD_RESPONSE",
            "Provider returned non-JSON content.",
            response.status_code,
        ) from error


def fetch_text(
    url: str,
    provider: ProviderName,
    timeout_seconds: float = 10.0,
    headers: dict[str, str] | None = None,
) -> str:
    response = _get(url, provider, timeout_seconds, headers)
    return response.text or ""
