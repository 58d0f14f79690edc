"""Tests for the periodic health sweep scheduler."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from msdashboard.health.scheduler import HealthSweepScheduler
from msdashboard.health.watcher import HealthWatcher


class TestSchedulerConfig:
    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            HealthSweepScheduler(MagicMock(spec=HealthWatcher), interval=0)


@pytest.mark.asyncio
class TestHealthSweepScheduler:
    async def test_first_sweep_runs_immediately(self) -> None:
        watcher = MagicMock(spec=HealthWatcher)
        scheduler = HealthSweepScheduler(watcher, interval=60)

        scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        watcher.poll_all.assert_called_once_with()
        assert scheduler.sweeps == 1

    async def test_sweeps_repeat_on_interval(self) -> None:
        watcher = MagicMock(spec=HealthWatcher)
        scheduler = HealthSweepScheduler(watcher, interval=0.05)

        scheduler.start()
        await asyncio.sleep(0.23)
        await scheduler.stop()

        assert watcher.poll_all.call_count >= 3

    async def test_failed_sweep_does_not_stop_the_loop(self) -> None:
        watcher = MagicMock(spec=HealthWatcher)
        watcher.poll_all.side_effect = [RuntimeError("directory down"), [], [], [], [], []]
        scheduler = HealthSweepScheduler(watcher, interval=0.05)

        scheduler.start()
        await asyncio.sleep(0.15)
        assert scheduler.running
        await scheduler.stop()

        assert watcher.poll_all.call_count >= 2

    async def test_start_twice_is_harmless(self) -> None:
        watcher = MagicMock(spec=HealthWatcher)
        scheduler = HealthSweepScheduler(watcher, interval=60)

        scheduler.start()
        scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        assert watcher.poll_all.call_count == 1

    async def test_stop_is_idempotent(self) -> None:
        scheduler = HealthSweepScheduler(MagicMock(spec=HealthWatcher), interval=60)

        scheduler.start()
        assert scheduler.running
        await scheduler.stop()
        await scheduler.stop()

        assert not scheduler.running
