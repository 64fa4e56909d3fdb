"""verifyflow exception hierarchy."""

from __future__ import annotations


class VerifyError(Exception):
    """Base exception for all verifyflow errors."""


class MissingApproveActionError(VerifyError):
    """approve / approve_all called without an approve action."""

    def __init__(self) -> None:
        super().__init__("no approve action object")


class CaptureApiError(VerifyError):
    """A call to the capture API failed."""


class CaptureNotFoundError(CaptureApiError):
    """The capture API has no capture with the requested id."""

    def __init__(self, capture_id: int) -> None:
        self.capture_id = capture_id
        super().__init__(f"Capture {capture_id} not found")


class CaptureNotLoadedError(VerifyError):
    """A selected capture id is not part of the loaded working set."""

    def __init__(self, capture_id: int) -> None:
        self.capture_id = capture_id
        super().__init__(f"Capture {capture_id} is not in the loaded page")


class LoadCancelledError(VerifyError):
    """A page load was superseded before it completed."""
