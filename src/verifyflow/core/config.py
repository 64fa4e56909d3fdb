"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic import PositiveInt
from pydantic_settings import BaseSettings

from verifyflow.models.filter import Filter


class WorkflowConfig(BaseSettings):
    """Review queue defaults: page size and the initial filter."""

    model_config = {"env_prefix": "VERIFY_WORKFLOW_"}

    page_size: PositiveInt = 24
    approved: bool = False
    active: bool = True

    def default_filter(self) -> Filter:
        return Filter(approved=self.approved, active=self.active)


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "VERIFY_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    log_json: bool = False

    workflow: WorkflowConfig = WorkflowConfig()
