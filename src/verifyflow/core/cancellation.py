"""Cooperative cancellation token handed to page fetches."""

from __future__ import annotations

from typing import Callable

from verifyflow.core.exceptions import LoadCancelledError


class CancellationToken:
    """One token per page load; cancelled when a newer load supersedes it.

    Fetch implementations may poll ``cancelled`` or register a callback to
    abort early. The page loader discards the result of a cancelled load
    whether or not the fetch noticed.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancel, or immediately if already cancelled."""
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise LoadCancelledError("page load superseded")
