"""CountCache — capture count for the active filter, refreshed when invalidated."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Coroutine

from verifyflow.core.protocols import ICaptureApi
from verifyflow.models.filter import Filter
from verifyflow.models.state import WorkflowEvent
from verifyflow.workflow.events import EventBus
from verifyflow.workflow.query import QueryState

Scheduler = Callable[[Coroutine[Any, Any, Any]], asyncio.Task]


class CountCache:
    """Lazily-invalidated count.

    ``invalidate()`` marks the value stale and schedules a refresh unless one
    is already running. The refresh keeps fetching until no invalidation
    happened during its last fetch.
    """

    def __init__(
        self,
        api: ICaptureApi,
        query: QueryState,
        events: EventBus,
        schedule: Scheduler,
    ) -> None:
        self._api = api
        self._query = query
        self._events = events
        self._schedule = schedule
        self._generation = 0
        self._task: asyncio.Task | None = None
        self.value: int | None = None
        self.invalid = True

    def invalidate(self, *, reset_value: bool = False) -> None:
        self._generation += 1
        self.invalid = True
        if reset_value:
            self.value = None
        self.ensure_refresh()

    def ensure_refresh(self) -> None:
        if self.invalid and (self._task is None or self._task.done()):
            self._task = self._schedule(self._refresh())

    async def _refresh(self) -> None:
        while self.invalid:
            await self.get_capture_count()

    async def get_capture_count(self, filter: Filter | None = None) -> int:
        if filter is None:
            filter = self._query.filter
        generation = self._generation
        count = int(await self._api.get_capture_count(filter))
        if generation == self._generation:
            self.value = count
            self.invalid = False
        self._events.emit(WorkflowEvent.COUNT_REFRESHED, count=count)
        return count
