"""Periodic sweep driver for the :class:`HealthWatcher`."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from msdashboard.constants import DEFAULT_SWEEP_INTERVAL
from msdashboard.health.watcher import HealthWatcher

logger = logging.getLogger(__name__)


class HealthSweepScheduler:
    """Background task that calls :meth:`HealthWatcher.poll_all` on an interval.

    The first sweep runs immediately after :meth:`start`.  Polls are not
    awaited, so a hung request never delays the next sweep.

    Parameters
    ----------
    watcher:
        The watcher whose ``poll_all`` is invoked.
    interval:
        Seconds between sweeps (default 30).
    """

    def __init__(self, watcher: HealthWatcher, *, interval: float = DEFAULT_SWEEP_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._watcher = watcher
        self._interval = interval
        self._task: Optional[asyncio.Task[None]] = None
        self._stopped = asyncio.Event()
        self._sweeps = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def sweeps(self) -> int:
        """Number of sweeps started so far."""
        return self._sweeps

    def start(self) -> None:
        """Launch the background sweep loop."""
        if self.running:
            logger.warning("Health sweep scheduler already running.")
            return
        self._stopped.clear()
        self._task = asyncio.create_task(self._run(), name="health-sweep")
        logger.info("Health sweep scheduler started (interval=%.0fs)", self._interval)

    async def stop(self) -> None:
        """Signal the loop to stop and wait for it."""
        self._stopped.set()
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Health sweep scheduler stopped.")

    async def _run(self) -> None:
        while not self._stopped.is_set():
            self._sweeps += 1
            try:
                self._watcher.poll_all()
            except Exception:
                logger.exception("Health sweep #%d failed to start", self._sweeps)
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self._interval)
                break  # stopped was set
            except asyncio.TimeoutError:
                pass  # interval elapsed, sweep again
