"""PageLoader — fetches one page of the working set, one load at a time."""

from __future__ import annotations

from verifyflow.core.cancellation import CancellationToken
from verifyflow.core.protocols import ICaptureApi
from verifyflow.models.state import WorkflowEvent
from verifyflow.workflow.events import EventBus
from verifyflow.workflow.query import QueryState
from verifyflow.workflow.working_set import WorkingSet


class PageLoader:
    """Owns the loading flag and the token of the load in flight.

    The flag is either held by a page load (``_token`` set) or by a batch
    (``hold()``). A load requested while the flag is set is dropped.
    """

    def __init__(
        self,
        api: ICaptureApi,
        query: QueryState,
        working_set: WorkingSet,
        events: EventBus,
    ) -> None:
        self._api = api
        self._query = query
        self._working_set = working_set
        self._events = events
        self._token: CancellationToken | None = None
        self.is_loading = False
        self.reload_pending = False

    def hold(self) -> bool:
        """Take the loading flag for a batch. False if it is already taken."""
        if self.is_loading:
            return False
        self.is_loading = True
        return True

    def release(self) -> None:
        if self._token is None:
            self.is_loading = False

    def supersede(self) -> None:
        """Cancel the load in flight; it no longer owns the loading flag."""
        if self._token is None:
            return
        self._token.cancel()
        self._token = None
        self.is_loading = False

    async def load(self, token: CancellationToken | None = None) -> bool:
        """Load the current page into the working set.

        Returns True when the page was applied or the request was dropped,
        False when the load was superseded and its result discarded.
        """
        if self.is_loading:
            if self._token is None:
                self.reload_pending = True
            self._events.emit(WorkflowEvent.LOAD_DROPPED)
            return True

        token = token or CancellationToken()
        self.is_loading = True
        self.reload_pending = False
        self._token = token
        params = self._query.page_params()
        self._events.emit(
            WorkflowEvent.LOAD_STARTED, skip=params.skip, rows_per_page=params.rows_per_page
        )
        try:
            images = await self._api.get_capture_images(params, token)
        except Exception as exc:
            if token.cancelled:
                self._events.emit(WorkflowEvent.LOAD_DISCARDED, skip=params.skip)
                return False
            self._events.emit(WorkflowEvent.LOAD_FAILED, skip=params.skip, error=str(exc))
            raise
        finally:
            if self._token is token:
                self._token = None
                self.is_loading = False

        if token.cancelled:
            self._events.emit(WorkflowEvent.LOAD_DISCARDED, skip=params.skip)
            return False
        self._working_set.replace(images)
        self._events.emit(WorkflowEvent.LOAD_COMPLETED, skip=params.skip, count=len(images))
        return True
