"""Logging initialization and the event-bus log handler, using loguru."""

from __future__ import annotations

import sys
from typing import Any

from loguru import logger

_WARNING_EVENTS = {"load_failed", "batch_failed", "batch_rejected"}
_INFO_EVENTS = {"batch_started", "batch_completed"}


def init_logging(level: str = "INFO", serialize: bool = False) -> None:
    """Replace loguru's default sink with a single stderr sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        serialize=serialize,
        backtrace=False,
        diagnose=False,
    )


def log_event(event: str, payload: dict[str, Any]) -> None:
    """EventBus handler writing every workflow event to the log."""
    if event in _WARNING_EVENTS:
        level = "WARNING"
    elif event in _INFO_EVENTS:
        level = "INFO"
    else:
        level = "DEBUG"
    details = ", ".join(f"{key}={value!r}" for key, value in payload.items())
    logger.bind(event=event).log(level, "{}: {}", event, details)
