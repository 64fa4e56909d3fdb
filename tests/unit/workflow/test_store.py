"""Tests for WorkflowStore: reactive reloads, filter reset and the snapshot."""

from __future__ import annotations

import asyncio

import pytest
from loguru import logger
from pydantic import ValidationError

from verifyflow.core.config import AppSettings, WorkflowConfig
from verifyflow.core.exceptions import CaptureApiError
from verifyflow.models.filter import Filter
from verifyflow.models.state import ClickEvent
from verifyflow.workflow import create_store
from verifyflow.workflow.store import WorkflowStore

from tests.fakes import RecordingCaptureApi, make_images


def _settings(page_size: int = 2) -> AppSettings:
    return AppSettings(workflow=WorkflowConfig(page_size=page_size))


def _ids(images) -> list[int]:
    return [image.id for image in images]


class TestStart:
    def test_loads_first_page_and_count(self):
        api = RecordingCaptureApi(make_images(1, 2, 3, 4, 5))

        async def scenario():
            store = WorkflowStore(api, settings=_settings())
            assert store.snapshot().invalidate_capture_count is True
            await store.start()
            await store.settle()
            return store.snapshot()

        snap = asyncio.run(scenario())
        assert _ids(snap.capture_images) == [1, 2]
        assert snap.capture_count == 5
        assert snap.invalidate_capture_count is False
        assert snap.is_loading is False
        assert snap.page_size == 2
        assert snap.current_page == 0
        assert snap.filter == Filter(approved=False, active=True)


class TestPaging:
    def test_page_change_clears_then_loads(self):
        api = RecordingCaptureApi(make_images(1, 2, 3, 4, 5))

        async def scenario():
            store = WorkflowStore(api, settings=_settings())
            await store.start()
            await store.settle()
            store.click_capture(ClickEvent(capture_id=2))
            store.set_current_page(1)
            cleared = store.snapshot()
            await store.settle()
            return cleared, store.snapshot()

        cleared, snap = asyncio.run(scenario())
        assert cleared.capture_images == []
        assert cleared.capture_images_selected == []
        assert cleared.capture_image_anchor is None
        assert _ids(snap.capture_images) == [3, 4]
        assert api.calls_for("page") == [("page", 0), ("page", 2)]

    def test_same_page_does_not_reload(self):
        api = RecordingCaptureApi(make_images(1, 2, 3))

        async def scenario():
            store = WorkflowStore(api, settings=_settings())
            await store.start()
            await store.settle()
            store.set_current_page(0)
            await store.settle()
            return store.snapshot()

        snap = asyncio.run(scenario())
        assert _ids(snap.capture_images) == [1, 2]
        assert len(api.calls_for("page")) == 1

    def test_invalid_page_size_raises_and_keeps_state(self):
        api = RecordingCaptureApi(make_images(1, 2, 3))

        async def scenario():
            store = WorkflowStore(api, settings=_settings())
            await store.start()
            await store.settle()
            with pytest.raises(ValidationError):
                store.set_page_size(0)
            return store.snapshot()

        snap = asyncio.run(scenario())
        assert snap.page_size == 2
        assert _ids(snap.capture_images) == [1, 2]

    def test_superseded_load_never_overwrites_newer_page(self):
        api = RecordingCaptureApi(make_images(1, 2, 3, 4, 5))

        async def scenario():
            api.page_gate = asyncio.Event()
            store = WorkflowStore(api, settings=_settings())
            await store.start()
            await asyncio.sleep(0)  # first load is waiting on the gate
            store.set_current_page(2)
            await asyncio.sleep(0)  # second load starts: the first no longer holds the flag
            api.page_gate.set()
            await store.settle()
            return store.snapshot()

        snap = asyncio.run(scenario())
        assert api.tokens[0].cancelled is True
        assert api.tokens[1].cancelled is False
        assert _ids(snap.capture_images) == [5]
        assert snap.is_loading is False

    def test_explicit_load_while_loading_is_noop(self):
        api = RecordingCaptureApi(make_images(1, 2, 3))

        async def scenario():
            api.page_gate = asyncio.Event()
            store = WorkflowStore(api, settings=_settings())
            await store.start()
            await asyncio.sleep(0)
            assert await store.load_capture_images() is True
            assert store.snapshot().capture_images == []
            api.page_gate.set()
            await store.settle()

        asyncio.run(scenario())
        assert len(api.calls_for("page")) == 1

    def test_failed_load_surfaces_from_settle(self):
        api = RecordingCaptureApi(make_images(1))
        api.fail("page", 0)

        async def scenario():
            store = WorkflowStore(api, settings=_settings())
            await store.start()
            with pytest.raises(CaptureApiError):
                await store.settle()
            return store.snapshot()

        snap = asyncio.run(scenario())
        assert snap.is_loading is False


class TestUpdateFilter:
    def test_resets_page_count_and_selection(self):
        api = RecordingCaptureApi(make_images(1, 2, 3, 4, 5))
        api.add(make_images(6)[0].model_copy(update={"approved": True}))

        async def scenario():
            store = WorkflowStore(api, settings=_settings())
            await store.start()
            await store.settle()
            store.set_current_page(1)
            await store.settle()
            store.click_capture(ClickEvent(capture_id=3))
            store.update_filter(Filter(approved=True))
            reset = store.snapshot()
            await store.settle()
            return reset, store.snapshot()

        reset, snap = asyncio.run(scenario())
        assert reset.capture_images == []
        assert reset.current_page == 0
        assert reset.capture_count is None
        assert reset.invalidate_capture_count is True
        assert reset.capture_images_selected == []
        assert _ids(snap.capture_images) == [6]
        assert snap.capture_count == 1
        assert snap.filter == Filter(approved=True)

    def test_reapplying_filter_reloads_once(self):
        api = RecordingCaptureApi(make_images(1, 2, 3))

        async def scenario():
            store = WorkflowStore(api, settings=_settings())
            await store.start()
            await store.settle()
            store.update_filter()
            await store.settle()
            return store.snapshot()

        snap = asyncio.run(scenario())
        assert _ids(snap.capture_images) == [1, 2]
        assert len(api.calls_for("page")) == 2
        assert len(api.calls_for("count")) == 2


def test_get_capture_count_with_other_filter():
    api = RecordingCaptureApi(make_images(1, 2, 3))

    async def scenario():
        store = WorkflowStore(api, settings=_settings())
        return await store.get_capture_count(Filter(approved=True))

    assert asyncio.run(scenario()) == 0


def test_click_emits_selection_event():
    api = RecordingCaptureApi(make_images(1, 2, 3))
    events: list[tuple[str, dict]] = []

    async def scenario():
        store = WorkflowStore(api, settings=_settings())
        await store.start()
        await store.settle()
        unsubscribe = store.subscribe(lambda event, payload: events.append((event, payload)))
        store.click_capture(ClickEvent(capture_id=2))
        store.click_capture(ClickEvent(capture_id=9, is_shift=True))  # not on the page
        unsubscribe()
        store.click_capture(ClickEvent(capture_id=1))

    asyncio.run(scenario())
    assert events == [("selection_changed", {"selected": [2], "anchor": 2})]


def test_create_store_logs_workflow_events():
    api = RecordingCaptureApi(make_images(1, 2))
    messages: list[str] = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")

    async def scenario():
        store = create_store(api, _settings())
        await store.start()
        await store.settle()

    try:
        asyncio.run(scenario())
    finally:
        logger.remove(sink_id)
    assert any(m.startswith("load_started") for m in messages)
    assert any(m.startswith("load_completed") for m in messages)
    assert any(m.startswith("count_refreshed") for m in messages)
