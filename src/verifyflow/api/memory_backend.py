"""Dict-backed ICaptureApi for tests and local runs."""

from __future__ import annotations

from typing import Any, Iterable

from verifyflow.core.cancellation import CancellationToken
from verifyflow.core.exceptions import CaptureNotFoundError
from verifyflow.models.capture import CaptureImage
from verifyflow.models.filter import Filter, PageParams


class MemoryCaptureApi:
    """Dict-backed ICaptureApi. Review decisions update the stored captures."""

    def __init__(self, images: Iterable[CaptureImage] = ()) -> None:
        self._captures: dict[int, CaptureImage] = {image.id: image for image in images}

    def add(self, image: CaptureImage) -> None:
        self._captures[image.id] = image

    def get(self, capture_id: int) -> CaptureImage:
        try:
            return self._captures[capture_id]
        except KeyError:
            raise CaptureNotFoundError(capture_id) from None

    def _update(self, capture_id: int, **fields: Any) -> None:
        self._captures[capture_id] = self.get(capture_id).model_copy(update=fields)

    def _matching(self, filter: Filter) -> list[CaptureImage]:
        return [c for _, c in sorted(self._captures.items()) if filter.matches(c)]

    async def get_capture_images(
        self, params: PageParams, token: CancellationToken | None = None
    ) -> list[CaptureImage]:
        if token is not None:
            token.raise_if_cancelled()
        matching = self._matching(params.filter)
        return matching[params.skip:params.skip + params.rows_per_page]

    async def get_capture_count(self, filter: Filter) -> int:
        return len(self._matching(filter))

    async def approve_capture_image(
        self,
        capture_id: int,
        morphology: str | None,
        age: str | None,
        capture_approval_tag: str | None,
        species_id: int | None,
    ) -> None:
        self._update(
            capture_id,
            approved=True,
            active=True,
            morphology=morphology,
            age=age,
            capture_approval_tag=capture_approval_tag,
            species_id=species_id,
        )

    async def reject_capture_image(self, capture_id: int, rejection_reason: str | None) -> None:
        self._update(capture_id, approved=False, active=False, rejection_reason=rejection_reason)

    async def create_capture_tags(self, capture_id: int, tags: list[str]) -> None:
        existing = self.get(capture_id).tags
        self._update(capture_id, tags=existing + [t for t in tags if t not in existing])

    async def undo_capture_image(self, capture_id: int) -> None:
        self._update(capture_id, approved=False, active=True, rejection_reason=None)
