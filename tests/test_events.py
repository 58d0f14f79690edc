"""Tests for the in-process event bus."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List

import pytest

from msdashboard.events.bus import EventBus
from msdashboard.events.models import HealthRetrievalFailed, HealthRetrieved, InstanceCreated
from msdashboard.instances.models import ApplicationInstance, Health


class _Base:
    pass


class _Child(_Base):
    pass


class TestEventBus:
    def test_delivers_to_matching_handlers_in_order(self) -> None:
        bus = EventBus()
        calls: List[str] = []
        bus.subscribe(HealthRetrieved, lambda e: calls.append("first"))
        bus.subscribe(HealthRetrieved, lambda e: calls.append("second"))
        bus.subscribe(InstanceCreated, lambda e: calls.append("other"))

        bus.publish(HealthRetrieved("a-1", Health.up()))

        assert calls == ["first", "second"]

    def test_subclass_events_reach_base_subscribers(self) -> None:
        bus = EventBus()
        seen: List[Any] = []
        bus.subscribe(_Base, seen.append)

        bus.publish(_Child())

        assert len(seen) == 1

    def test_publish_without_handlers_is_fine(self) -> None:
        EventBus().publish(InstanceCreated(ApplicationInstance("a-1", "http://h")))

    def test_failing_handler_does_not_stop_others(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="msdashboard")
        bus = EventBus()
        seen: List[Any] = []

        def boom(event: Any) -> None:
            raise ValueError("handler broke")

        bus.subscribe(HealthRetrievalFailed, boom)
        bus.subscribe(HealthRetrievalFailed, seen.append)

        bus.publish(HealthRetrievalFailed("a-1", "http://h/health", RuntimeError("x")))

        assert len(seen) == 1
        assert "Event handler" in caplog.text
        assert "handler broke" in caplog.text

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        seen: List[Any] = []
        bus.subscribe(HealthRetrieved, seen.append)

        assert bus.unsubscribe(HealthRetrieved, seen.append)
        assert not bus.unsubscribe(HealthRetrieved, seen.append)
        bus.publish(HealthRetrieved("a-1", Health.up()))

        assert seen == []

    def test_async_handler_without_loop_is_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="msdashboard")
        bus = EventBus()

        async def handler(event: Any) -> None:
            pass

        bus.subscribe(HealthRetrieved, handler)
        bus.publish(HealthRetrieved("a-1", Health.up()))

        assert bus.pending == 0
        assert "No running event loop" in caplog.text


@pytest.mark.asyncio
class TestEventBusAsync:
    async def test_async_handler_is_scheduled(self) -> None:
        bus = EventBus()
        seen: List[Any] = []

        async def handler(event: Any) -> None:
            await asyncio.sleep(0)
            seen.append(event)

        bus.subscribe(HealthRetrieved, handler)
        event = HealthRetrieved("a-1", Health.up())
        bus.publish(event)

        assert seen == []
        assert bus.pending == 1
        await bus.join()
        assert seen == [event]
        assert bus.pending == 0

    async def test_async_handler_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="msdashboard")
        bus = EventBus()

        async def handler(event: Any) -> None:
            raise RuntimeError("async boom")

        bus.subscribe(HealthRetrieved, handler)
        bus.publish(HealthRetrieved("a-1", Health.up()))
        await bus.join()

        assert "Async event handler" in caplog.text
        assert "async boom" in caplog.text
