"""Synchronous event bus for workflow hook points (start / success / failure)."""

from __future__ import annotations

from typing import Any, Callable

from verifyflow.core.types import EventHandler
from verifyflow.models.state import WorkflowEvent


class EventBus:
    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler``; the returned callable unsubscribes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def emit(self, event: WorkflowEvent, **payload: Any) -> None:
        for handler in list(self._handlers):
            handler(event.value, payload)
