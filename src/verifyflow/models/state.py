"""Workflow state models: page state, clicks, events, and the read-only snapshot."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt

from verifyflow.models.capture import CaptureImage
from verifyflow.models.filter import Filter


class WorkflowEvent(StrEnum):
    LOAD_STARTED = "load_started"
    LOAD_COMPLETED = "load_completed"
    LOAD_DROPPED = "load_dropped"
    LOAD_DISCARDED = "load_discarded"
    LOAD_FAILED = "load_failed"
    COUNT_REFRESHED = "count_refreshed"
    SELECTION_CHANGED = "selection_changed"
    BATCH_STARTED = "batch_started"
    BATCH_PROGRESS = "batch_progress"
    BATCH_COMPLETED = "batch_completed"
    BATCH_FAILED = "batch_failed"
    BATCH_REJECTED = "batch_rejected"


class BatchKind(StrEnum):
    APPROVE = "approve"
    UNDO = "undo"


class PageState(BaseModel):
    """The page coordinates of the working set."""

    model_config = {"frozen": True}

    page_size: PositiveInt = 24
    current_page: NonNegativeInt = 0

    @property
    def skip(self) -> int:
        return self.page_size * self.current_page


class ClickEvent(BaseModel):
    """A click on a capture tile, with the modifier keys held at the time."""

    model_config = {"frozen": True}

    capture_id: int
    is_shift: bool = False
    is_cmd: bool = False
    is_ctrl: bool = False


class WorkflowSnapshot(BaseModel):
    """Read-only view of the store handed to the presentation layer."""

    model_config = {"frozen": True}

    capture_images: list[CaptureImage] = Field(default_factory=list)
    capture_images_selected: list[int] = Field(default_factory=list)
    capture_image_anchor: Optional[int] = None
    capture_images_undo: list[CaptureImage] = Field(default_factory=list)
    is_loading: bool = False
    is_approve_all_processing: bool = False
    approve_all_complete: float = 0.0
    page_size: int = 24
    current_page: int = 0
    filter: Filter = Field(default_factory=Filter)
    invalidate_capture_count: bool = True
    capture_count: Optional[int] = None
