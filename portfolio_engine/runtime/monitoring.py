"""Structured logging for engine operations."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

LOGGER = logging.getLogger("portfolio_engine.events")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def log_engine_event(
    operation: str,
    latency_ms: float,
    success: bool,
    warning: str | None = None,
    **fields: Any,
) -> None:
    payload: dict[str, Any] = {
        "operation": operation,
        "latency_ms": round(latency_ms, 3),
        "success": success,
        "timestamp": int(time.time()),
    }
    payload.update(fields)
    if warning:
        payload["warning"] = warning
    LOGGER.info(json.dumps(payload, ensure_ascii=True, default=str))
