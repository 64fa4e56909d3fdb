"""The loaded page of captures, indexed by id."""

from __future__ import annotations

from typing import Iterable, Iterator

from verifyflow.models.capture import CaptureImage


class WorkingSet:
    """Ordered captures of the current page with O(1) id -> position lookup."""

    def __init__(self, images: Iterable[CaptureImage] = ()) -> None:
        self._images: list[CaptureImage] = []
        self._positions: dict[int, int] = {}
        self.replace(images)

    def _reindex(self) -> None:
        self._positions = {image.id: i for i, image in enumerate(self._images)}

    def replace(self, images: Iterable[CaptureImage]) -> None:
        self._images = list(images)
        self._reindex()

    def clear(self) -> None:
        self.replace(())

    def insert_sorted(self, image: CaptureImage) -> None:
        """Add ``image`` and re-sort the page by ascending id.

        A capture already on the page with the same id is replaced in place.
        """
        position = self._positions.get(image.id)
        if position is not None:
            self._images[position] = image
            return
        self._images.append(image)
        self._images.sort(key=lambda c: c.id)
        self._reindex()

    def get(self, capture_id: int) -> CaptureImage | None:
        position = self._positions.get(capture_id)
        return None if position is None else self._images[position]

    def position(self, capture_id: int) -> int | None:
        return self._positions.get(capture_id)

    def ids_between(self, start: int, end: int) -> list[int]:
        """Ids from position ``start`` to ``end`` inclusive, in page order."""
        return [image.id for image in self._images[start:end + 1]]

    def subset(self, capture_ids: Iterable[int]) -> list[CaptureImage]:
        """Captures whose id is in ``capture_ids``, in page order."""
        wanted = set(capture_ids)
        return [image for image in self._images if image.id in wanted]

    def as_list(self) -> list[CaptureImage]:
        return list(self._images)

    def __contains__(self, capture_id: object) -> bool:
        return capture_id in self._positions

    def __iter__(self) -> Iterator[CaptureImage]:
        return iter(self._images)

    def __len__(self) -> int:
        return len(self._images)
