"""WorkflowStore — the review queue state container.

Composes the filter controller, page loader, count cache, selection engine
and batch processor, and is the single entry point for the presentation
layer. Must be used from within a running asyncio event loop: dependency
changes schedule page loads and count refreshes as tasks.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Coroutine

from verifyflow.core.cancellation import CancellationToken
from verifyflow.core.config import AppSettings
from verifyflow.core.protocols import ICaptureApi
from verifyflow.core.types import EventHandler
from verifyflow.models.capture import ApproveAction
from verifyflow.models.filter import Filter
from verifyflow.models.state import ClickEvent, WorkflowEvent, WorkflowSnapshot
from verifyflow.workflow.batch import BatchProcessor
from verifyflow.workflow.count_cache import CountCache
from verifyflow.workflow.events import EventBus
from verifyflow.workflow.page_loader import PageLoader
from verifyflow.workflow.query import QueryState
from verifyflow.workflow.selection import SelectionEngine
from verifyflow.workflow.working_set import WorkingSet


class WorkflowStore:
    def __init__(
        self,
        api: ICaptureApi,
        *,
        settings: AppSettings | None = None,
        events: EventBus | None = None,
    ) -> None:
        if settings is None:
            settings = AppSettings()

        self._events = events or EventBus()
        self._tasks: set[asyncio.Task] = set()

        self._query = QueryState(
            filter=settings.workflow.default_filter(),
            page_size=settings.workflow.page_size,
        )
        self._working_set = WorkingSet()
        self._selection = SelectionEngine(self._working_set)
        self._loader = PageLoader(api, self._query, self._working_set, self._events)
        self._count = CountCache(api, self._query, self._events, self._schedule)
        self._batch = BatchProcessor(
            api=api,
            working_set=self._working_set,
            selection=self._selection,
            loader=self._loader,
            count=self._count,
            events=self._events,
        )
        self._query.on_change(self._on_query_change)

    # ---- task bookkeeping ----

    def _schedule(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._forget)
        return task

    def _forget(self, task: asyncio.Task) -> None:
        # failed tasks stay until settle() re-raises their error
        if task.cancelled() or task.exception() is None:
            self._tasks.discard(task)

    async def start(self) -> None:
        """Run the on-construction effects: count refresh and the first load."""
        self._count.ensure_refresh()
        self._schedule_load()

    async def settle(self) -> None:
        """Wait for scheduled loads and count refreshes; re-raise their failures."""
        while self._tasks:
            tasks = list(self._tasks)
            self._tasks.difference_update(tasks)
            results = await asyncio.gather(*tasks, return_exceptions=True)
            errors = [r for r in results if isinstance(r, Exception)]
            if errors:
                raise errors[0]

    def _schedule_load(self) -> None:
        self._schedule(self._loader.load(CancellationToken()))

    def _on_query_change(self) -> None:
        self._working_set.clear()
        self._selection.clear()
        self._loader.supersede()
        self._schedule_load()

    def _reload_if_pending(self) -> None:
        if self._loader.reload_pending and not self._loader.is_loading:
            self._schedule_load()

    # ---- read surface ----

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        return self._events.subscribe(handler)

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            capture_images=self._working_set.as_list(),
            capture_images_selected=list(self._selection.selected),
            capture_image_anchor=self._selection.anchor,
            capture_images_undo=list(self._batch.undo),
            is_loading=self._loader.is_loading,
            is_approve_all_processing=self._batch.is_processing,
            approve_all_complete=self._batch.percent_complete,
            page_size=self._query.page_size,
            current_page=self._query.current_page,
            filter=self._query.filter,
            invalidate_capture_count=self._count.invalid,
            capture_count=self._count.value,
        )

    # ---- commands ----

    async def approve(self, capture_id: int, approve_action: ApproveAction | None) -> bool:
        return await self._batch.approve(capture_id, approve_action)

    async def load_capture_images(self, token: CancellationToken | None = None) -> bool:
        return await self._loader.load(token)

    async def approve_all(self, approve_action: ApproveAction | None) -> bool:
        result = await self._batch.approve_all(approve_action)
        self._reload_if_pending()
        return result

    async def undo_all(self) -> bool:
        result = await self._batch.undo_all()
        self._reload_if_pending()
        return result

    def update_filter(self, new_filter: Filter | None = None) -> None:
        """Replace the filter and reset to the first page with a fresh count."""
        if new_filter is None:
            new_filter = self._query.filter
        self._query.update(filter=new_filter, current_page=0, force=True)
        self._count.invalidate(reset_value=True)
        self._selection.clear()

    async def get_capture_count(self, filter: Filter | None = None) -> int:
        return await self._count.get_capture_count(filter)

    def click_capture(self, click: ClickEvent) -> None:
        if self._selection.click(click):
            self._events.emit(
                WorkflowEvent.SELECTION_CHANGED,
                selected=list(self._selection.selected),
                anchor=self._selection.anchor,
            )

    def set_page_size(self, page_size: int) -> None:
        self._query.update(page_size=page_size)

    def set_current_page(self, current_page: int) -> None:
        self._query.update(current_page=current_page)
