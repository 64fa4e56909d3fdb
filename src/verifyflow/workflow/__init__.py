"""Verification workflow engine behind a single store."""

from __future__ import annotations

from verifyflow.core.config import AppSettings
from verifyflow.core.logging import init_logging, log_event
from verifyflow.core.protocols import ICaptureApi
from verifyflow.workflow.store import WorkflowStore


def create_store(
    api: ICaptureApi,
    settings: AppSettings | None = None,
    *,
    configure_logging: bool = False,
) -> WorkflowStore:
    """Create a store wired to ``api`` with workflow events sent to the log.

    ``configure_logging`` also replaces loguru's sinks according to settings.
    """
    if settings is None:
        settings = AppSettings()

    if configure_logging:
        init_logging(settings.log_level, serialize=settings.log_json)

    store = WorkflowStore(api, settings=settings)
    store.subscribe(log_event)
    return store


__all__ = ["WorkflowStore", "create_store"]
