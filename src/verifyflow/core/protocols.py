"""Protocol interfaces for verifyflow collaborators.

The engine talks to the capture API only through these Protocols: structural
typing, no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from verifyflow.core.cancellation import CancellationToken
    from verifyflow.models.capture import CaptureImage
    from verifyflow.models.filter import Filter, PageParams


# ---------------------------------------------------------------------------
# Capture API
# ---------------------------------------------------------------------------

@runtime_checkable
class ICaptureApi(Protocol):
    """Remote capture review API. Every failure is raised, never returned."""

    async def get_capture_images(
        self, params: PageParams, token: CancellationToken | None = None
    ) -> list[CaptureImage]: ...

    async def get_capture_count(self, filter: Filter) -> int: ...

    async def approve_capture_image(
        self,
        capture_id: int,
        morphology: str | None,
        age: str | None,
        capture_approval_tag: str | None,
        species_id: int | None,
    ) -> None: ...

    async def reject_capture_image(self, capture_id: int, rejection_reason: str | None) -> None: ...

    async def create_capture_tags(self, capture_id: int, tags: list[str]) -> None: ...

    async def undo_capture_image(self, capture_id: int) -> None: ...
