"""Capture filter and page request models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, NonNegativeInt, PositiveInt

from verifyflow.models.capture import CaptureImage


class Filter(BaseModel):
    """Immutable predicate over captures. ``None`` fields do not constrain."""

    model_config = {"frozen": True}

    approved: Optional[bool] = False
    active: Optional[bool] = True
    species_id: Optional[int] = None
    tag: Optional[str] = None
    planter_id: Optional[int] = None
    device_identifier: Optional[str] = None

    def matches(self, image: CaptureImage) -> bool:
        if self.approved is not None and image.approved != self.approved:
            return False
        if self.active is not None and image.active != self.active:
            return False
        if self.species_id is not None and image.species_id != self.species_id:
            return False
        if self.tag is not None and self.tag not in image.tags:
            return False
        if self.planter_id is not None and image.planter_id != self.planter_id:
            return False
        if self.device_identifier is not None and image.device_identifier != self.device_identifier:
            return False
        return True


class PageParams(BaseModel):
    """Arguments of a single page fetch."""

    skip: NonNegativeInt
    rows_per_page: PositiveInt
    filter: Filter
