"""BatchProcessor — sequential approve-all and undo-all with progress.

Items run strictly one after another in list order. The first failing item
stops the batch; items already applied on the server stay applied.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from verifyflow.core.exceptions import CaptureNotLoadedError, MissingApproveActionError
from verifyflow.core.protocols import ICaptureApi
from verifyflow.models.capture import ApproveAction, CaptureImage
from verifyflow.models.state import BatchKind, WorkflowEvent
from verifyflow.workflow.count_cache import CountCache
from verifyflow.workflow.events import EventBus
from verifyflow.workflow.page_loader import PageLoader
from verifyflow.workflow.selection import SelectionEngine
from verifyflow.workflow.working_set import WorkingSet


class BatchProcessor:
    def __init__(
        self,
        *,
        api: ICaptureApi,
        working_set: WorkingSet,
        selection: SelectionEngine,
        loader: PageLoader,
        count: CountCache,
        events: EventBus,
    ) -> None:
        self._api = api
        self._working_set = working_set
        self._selection = selection
        self._loader = loader
        self._count = count
        self._events = events
        self.undo: list[CaptureImage] = []
        self.is_processing = False
        self.percent_complete = 0.0

    async def approve(self, capture_id: int, action: ApproveAction | None) -> bool:
        """Approve or reject one capture, then attach the action's tags."""
        if action is None:
            raise MissingApproveActionError()
        if action.is_approved:
            await self._api.approve_capture_image(
                capture_id,
                action.morphology,
                action.age,
                action.capture_approval_tag,
                action.species_id,
            )
        else:
            await self._api.reject_capture_image(capture_id, action.rejection_reason)
        if action.tags:
            await self._api.create_capture_tags(capture_id, action.tags)
        return True

    async def approve_all(self, action: ApproveAction | None) -> bool:
        """Apply ``action`` to every selected capture, in selection order.

        On success the captures selected before the batch become the undo
        list, the current page is reloaded, the count is invalidated and the
        selection cleared. On failure nothing but the flags is touched.
        """
        if action is None:
            raise MissingApproveActionError()
        selected = list(self._selection.selected)
        if not self._begin(BatchKind.APPROVE, len(selected)):
            return False

        snapshot = self._working_set.subset(selected)
        by_id = {image.id: image for image in snapshot}

        async def approve_one(capture_id: int) -> None:
            if capture_id not in by_id:
                raise CaptureNotLoadedError(capture_id)
            await self.approve(capture_id, action)

        if not await self._run(BatchKind.APPROVE, selected, approve_one):
            return False

        self.undo = snapshot
        self._count.invalidate()
        self._selection.clear()
        try:
            self._loader.release()
            await self._loader.load()
        finally:
            self._finish()
        self._events.emit(WorkflowEvent.BATCH_COMPLETED, kind=BatchKind.APPROVE, total=len(selected))
        return True

    async def undo_all(self) -> bool:
        """Undo every capture of the undo list and merge it back into the page."""
        pending = list(self.undo)
        if not self._begin(BatchKind.UNDO, len(pending)):
            return False

        by_id = {image.id: image for image in pending}

        async def undo_one(capture_id: int) -> None:
            await self._api.undo_capture_image(capture_id)
            self.undo = [image for image in self.undo if image.id != capture_id]
            self._working_set.insert_sorted(by_id[capture_id])
            self._count.invalidate()

        if not await self._run(BatchKind.UNDO, list(by_id), undo_one):
            return False

        self._finish()
        self._count.invalidate()
        self._selection.clear()
        self._events.emit(WorkflowEvent.BATCH_COMPLETED, kind=BatchKind.UNDO, total=len(pending))
        return True

    def _begin(self, kind: BatchKind, total: int) -> bool:
        if self.is_processing or not self._loader.hold():
            self._events.emit(WorkflowEvent.BATCH_REJECTED, kind=kind)
            return False
        self.is_processing = True
        self.percent_complete = 0.0
        self._events.emit(WorkflowEvent.BATCH_STARTED, kind=kind, total=total)
        return True

    def _finish(self) -> None:
        self.is_processing = False
        self.percent_complete = 0.0
        self._loader.release()

    async def _run(
        self,
        kind: BatchKind,
        capture_ids: list[int],
        step: Callable[[int], Awaitable[None]],
    ) -> bool:
        total = len(capture_ids)
        for done, capture_id in enumerate(capture_ids, start=1):
            try:
                await step(capture_id)
            except Exception as exc:
                # percent_complete keeps the last value reached
                self.is_processing = False
                self._loader.release()
                self._events.emit(
                    WorkflowEvent.BATCH_FAILED,
                    kind=kind,
                    capture_id=capture_id,
                    processed=done - 1,
                    total=total,
                    error=str(exc),
                )
                return False
            self.percent_complete = 100 * done / total
            self._events.emit(
                WorkflowEvent.BATCH_PROGRESS,
                kind=kind,
                capture_id=capture_id,
                percent_complete=self.percent_complete,
            )
        return True
