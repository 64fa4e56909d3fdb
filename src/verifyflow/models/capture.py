"""Capture image and approve action models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CaptureImage(BaseModel):
    """A single capture awaiting (or past) human review. Identity is ``id``."""

    id: int
    image_url: str = ""
    planter_id: Optional[int] = None
    device_identifier: str = ""
    approved: bool = False
    active: bool = True

    # --- Review fields, written by approve / reject ---
    morphology: Optional[str] = None  # seedling, direct_seedling, fmnr
    age: Optional[str] = None  # new_tree, over_two_years
    species_id: Optional[int] = None
    capture_approval_tag: Optional[str] = None  # simple_leaf, complex_leaf, ...
    rejection_reason: Optional[str] = None  # not_tree, blurry_image, duplicate_image, ...
    tags: list[str] = Field(default_factory=list)

    time_created: Optional[datetime] = None


class ApproveAction(BaseModel):
    """What the reviewer decided for every capture in a batch."""

    is_approved: bool = False
    morphology: Optional[str] = None
    age: Optional[str] = None
    capture_approval_tag: Optional[str] = None
    species_id: Optional[int] = None
    rejection_reason: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
