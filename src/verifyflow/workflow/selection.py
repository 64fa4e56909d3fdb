"""SelectionEngine — click, shift-click range and cmd/ctrl toggle selection."""

from __future__ import annotations

from verifyflow.models.state import ClickEvent
from verifyflow.workflow.working_set import WorkingSet


class SelectionEngine:
    """Selected ids (insertion order, no duplicates) and the shift-click anchor.

    Ranges are computed against the current order of the working set.
    """

    def __init__(self, working_set: WorkingSet) -> None:
        self._working_set = working_set
        self.selected: list[int] = []
        self.anchor: int | None = None

    def clear(self) -> None:
        self.selected = []
        self.anchor = None

    def click(self, click: ClickEvent) -> bool:
        """Apply one click. Returns False when the click changed nothing."""
        if not (click.is_shift or click.is_cmd or click.is_ctrl):
            self.selected = [click.capture_id]
            self.anchor = click.capture_id
            return True
        if click.is_shift:
            return self._select_range(click.capture_id)
        return self._toggle(click.capture_id)

    def _select_range(self, capture_id: int) -> bool:
        index_current = self._working_set.position(capture_id)
        if index_current is None:
            return False
        index_anchor = 0
        if self.anchor is not None:
            index_anchor = self._working_set.position(self.anchor) or 0
        self.selected = self._working_set.ids_between(
            min(index_anchor, index_current), max(index_anchor, index_current)
        )
        return True

    def _toggle(self, capture_id: int) -> bool:
        if capture_id in self.selected:
            self.selected = [i for i in self.selected if i != capture_id]
        else:
            self.selected = [*self.selected, capture_id]
        return True
