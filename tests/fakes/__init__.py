"""Shared test doubles: a recording capture API built on the memory backend."""

from __future__ import annotations

import asyncio
from typing import Any

from verifyflow.api.memory_backend import MemoryCaptureApi
from verifyflow.core.cancellation import CancellationToken
from verifyflow.core.exceptions import CaptureApiError
from verifyflow.models.capture import CaptureImage
from verifyflow.models.filter import Filter, PageParams


def make_images(*ids: int) -> list[CaptureImage]:
    return [CaptureImage(id=i, image_url=f"https://img.example/{i}.jpg") for i in ids]


class RecordingCaptureApi(MemoryCaptureApi):
    """MemoryCaptureApi that logs every call and fails on request.

    ``page_gate``, ``count_gate`` and ``undo_gate`` (when set) block page
    fetches, count fetches and undo calls until the event is set. Page
    fetches ignore their token, like a transport that cannot abort.
    """

    def __init__(self, images=()) -> None:
        super().__init__(images)
        self.calls: list[tuple[str, Any]] = []
        self.tokens: list[CancellationToken | None] = []
        self.page_gate: asyncio.Event | None = None
        self.count_gate: asyncio.Event | None = None
        self.undo_gate: asyncio.Event | None = None
        self._failures: set[tuple[str, Any]] = set()

    def fail(self, operation: str, key: Any) -> None:
        self._failures.add((operation, key))

    def calls_for(self, *operations: str) -> list[tuple[str, Any]]:
        return [call for call in self.calls if call[0] in operations]

    def _record(self, operation: str, key: Any) -> None:
        self.calls.append((operation, key))
        if (operation, key) in self._failures:
            raise CaptureApiError(f"{operation} failed for {key}")

    async def get_capture_images(self, params: PageParams, token=None) -> list[CaptureImage]:
        self.tokens.append(token)
        self._record("page", params.skip)
        if self.page_gate is not None:
            await self.page_gate.wait()
        return await super().get_capture_images(params)

    async def get_capture_count(self, filter: Filter) -> int:
        self._record("count", filter)
        if self.count_gate is not None:
            await self.count_gate.wait()
        return await super().get_capture_count(filter)

    async def approve_capture_image(self, capture_id, morphology, age, capture_approval_tag, species_id):
        self._record("approve", capture_id)
        await super().approve_capture_image(
            capture_id, morphology, age, capture_approval_tag, species_id
        )

    async def reject_capture_image(self, capture_id, rejection_reason):
        self._record("reject", capture_id)
        await super().reject_capture_image(capture_id, rejection_reason)

    async def create_capture_tags(self, capture_id, tags):
        self._record("tags", capture_id)
        await super().create_capture_tags(capture_id, tags)

    async def undo_capture_image(self, capture_id):
        self._record("undo", capture_id)
        if self.undo_gate is not None:
            await self.undo_gate.wait()
        await super().undo_capture_image(capture_id)


__all__ = ["MemoryCaptureApi", "RecordingCaptureApi", "make_images"]
