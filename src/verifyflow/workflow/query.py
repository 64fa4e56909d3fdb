"""Filter controller: the filter / page size / page number dependency set.

Every change to the set is reported once to the registered listeners, which
is how the store knows to clear the page and schedule a fresh load.
"""

from __future__ import annotations

from typing import Callable

from verifyflow.models.filter import Filter, PageParams
from verifyflow.models.state import PageState


class QueryState:
    def __init__(self, filter: Filter, page_size: int = 24, current_page: int = 0) -> None:
        self._filter = filter
        self._page = PageState(page_size=page_size, current_page=current_page)
        self._listeners: list[Callable[[], None]] = []

    @property
    def filter(self) -> Filter:
        return self._filter

    @property
    def page_size(self) -> int:
        return self._page.page_size

    @property
    def current_page(self) -> int:
        return self._page.current_page

    def on_change(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def page_params(self) -> PageParams:
        return PageParams(
            skip=self._page.skip,
            rows_per_page=self._page.page_size,
            filter=self._filter,
        )

    def update(
        self,
        *,
        filter: Filter | None = None,
        page_size: int | None = None,
        current_page: int | None = None,
        force: bool = False,
    ) -> bool:
        """Apply the given changes and notify listeners once if anything changed.

        ``force`` notifies even when every value is unchanged, so re-applying
        the current filter still reloads the page. Invalid page values raise
        ``pydantic.ValidationError`` and leave the state untouched.
        """
        page = PageState(
            page_size=self._page.page_size if page_size is None else page_size,
            current_page=self._page.current_page if current_page is None else current_page,
        )
        new_filter = self._filter if filter is None else filter
        changed = page != self._page or new_filter != self._filter
        self._page = page
        self._filter = new_filter
        if changed or force:
            for listener in list(self._listeners):
                listener()
        return changed or force
