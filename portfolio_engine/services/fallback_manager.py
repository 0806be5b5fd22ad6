"""Ordered first-success-wins orchestration over provider calls."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from portfolio_engine.providers.http import ProviderError
from portfolio_engine.services.base import ErrorEnvelope, ServiceResult, envelope_from_provider_error

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderAttempt(Generic[T]):
    key: str
    label: str
    call: Callable[[], T | None]


class FallbackManager:
    """Walks attempts in order and stops at the first non-None value.

    Attempts are never raced: the next provider is only called once the
    previous one has definitively failed or returned nothing.
    """

    def __init__(self, unavailable_message: str = "All data providers are currently unavailable.") -> None:
        self._unavailable_message = unavailable_message

    def execute(self, operation: str, subject: str, attempts: list[ProviderAttempt[T]]) -> ServiceResult[T]:
        last_error: ErrorEnvelope | None = None
        had_fallback = False
        for attempt in attempts:
            started = time.perf_counter()
            try:
                value = attempt.call()
                elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
                LOGGER.info(
                    "provider attempt complete: op=%s subject=%s provider=%s success=%s latency_ms=%s",
                    operation,
                    subject,
                    attempt.label,
                    value is not None,
                    elapsed_ms,
                )
                if value is not None:
                    warning = "Used fallback provider due to upstream issue." if had_fallback else None
                    return ServiceResult(
                        data=value,
                        source=attempt.key,
                        warning=warning,
                        fetched_at=time.time(),
                        data_provider=attempt.label,
                    )
                had_fallback = True
                last_error = ErrorEnvelope(
                    code="NOT_FOUND",
                    message=f"{attempt.label} returned no data.",
                    retriable=False,
                    provider=attempt.label,
                )
            except ProviderError as error:
                had_fallback = True
                elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
                LOGGER.warning(
                    "provider attempt failed: op=%s subject=%s provider=%s code=%s status=%s latency_ms=%s",
                    operation,
                    subject,
                    attempt.label,
                    error.code,
                    error.status,
                    elapsed_ms,
                )
                last_error = envelope_from_provider_error(error)
            except Exception:
                had_fallback = True
                elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
                LOGGER.exception(
                    "provider attempt unexpected failure: op=%s subject=%s provider=%s latency_ms=%s",
                    operation,
                    subject,
                    attempt.label,
                    elapsed_ms,
                )
                last_error = ErrorEnvelope(
                    code="UPSTREAM",
                    message=f"{attempt.label} failed unexpectedly.",
                    provider=attempt.label,
                )

        if not attempts:
            return ServiceResult(
                data=None,
                error=ErrorEnvelope(code="NOT_CONFIGURED", message="No provider is configured.", retriable=False),
            )
        detail = f" Last error: {last_error.message}" if last_error else ""
        return ServiceResult(
            data=None,
            error=ErrorEnvelope(
                code=last_error.code if last_error else "UPSTREAM",
                message=f"{self._unavailable_message}{detail}",
                retriable=last_error.retriable if last_error else True,
                provider=last_error.provider if last_error else None,
            ),
        )
