"""Health watcher: polls instance health endpoints and publishes the outcome.

Fetching health and applying it to the store are separate steps.  The
creation/sweep path only issues requests and publishes
:class:`HealthRetrieved` or :class:`HealthRetrievalFailed`; the store is
updated solely by :meth:`HealthWatcher.on_health_retrieved` reacting to the
former.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Set

import httpx

from msdashboard.errors import InstanceNotFoundError
from msdashboard.events.bus import EventBus
from msdashboard.events.models import HealthRetrievalFailed, HealthRetrieved, InstanceCreated
from msdashboard.instances.directory import InstanceDirectory
from msdashboard.instances.models import Health

logger = logging.getLogger(__name__)


class HealthWatcher:
    """Bridges instance creation and periodic sweeps to async health polls.

    Parameters
    ----------
    directory:
        The :class:`InstanceDirectory` to read instances from and to apply
        retrieved health to.
    client:
        ``httpx.AsyncClient`` used for the health requests.  Its timeout is
        the per-request bound; the watcher adds none of its own.
    bus:
        The :class:`EventBus` outcomes are published on.
    """

    def __init__(
        self,
        directory: InstanceDirectory,
        client: httpx.AsyncClient,
        bus: EventBus,
    ) -> None:
        self._directory = directory
        self._client = client
        self._bus = bus
        self._in_flight: Set[asyncio.Task[None]] = set()

    def register(self, bus: Optional[EventBus] = None) -> None:
        """Subscribe the watcher's listeners on *bus* (default: its own bus)."""
        target = bus or self._bus
        target.subscribe(InstanceCreated, self.on_instance_created)
        target.subscribe(HealthRetrieved, self.on_health_retrieved)

    # ── Listeners ────────────────────────────────────────────────────────

    def on_instance_created(self, event: InstanceCreated) -> Optional[asyncio.Task[None]]:
        """Poll a freshly created instance if it exposes a health endpoint."""
        instance = event.instance
        endpoint = instance.health_endpoint
        if not endpoint:
            logger.debug("[%s] No health endpoint, skipping retrieval", instance.id)
            return None
        return self._poll(instance.id, endpoint)

    def on_health_retrieved(self, event: HealthRetrieved) -> None:
        """Apply retrieved health to the directory.  Publishes nothing."""
        try:
            self._directory.update_health(event.instance_id, event.health.status)
        except InstanceNotFoundError:
            logger.error(
                "Retrieved health for unknown application instance [%s], update dropped",
                event.instance_id,
            )

    # ── Sweeps ───────────────────────────────────────────────────────────

    def poll_all(self) -> List[asyncio.Task[None]]:
        """Issue one independent poll per known instance with a health endpoint.

        Works on a snapshot of the directory; instances created while the
        sweep runs are picked up by the next one.  The returned tasks are
        not awaited here.
        """
        logger.info("Retrieving [HEALTH] data for all application instances")
        tasks: List[asyncio.Task[None]] = []
        for instance in self._directory.list_all():
            endpoint = instance.health_endpoint
            if not endpoint:
                continue
            logger.info("Retrieving [HEALTH] data for %s", instance.id)
            tasks.append(self._poll(instance.id, endpoint))
        return tasks

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    async def wait_idle(self) -> None:
        """Wait for every outstanding poll to finish."""
        while self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    # ── Internals ────────────────────────────────────────────────────────

    def _poll(self, instance_id: str, endpoint: str) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(
            self._retrieve(instance_id, endpoint),
            name=f"health-{instance_id}",
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _retrieve(self, instance_id: str, endpoint: str) -> None:
        try:
            health = await self._fetch(endpoint)
        except Exception as exc:
            logger.warning(
                "Could not retrieve health information for [%s]: %s: %s",
                endpoint,
                type(exc).__name__,
                exc,
            )
            self._bus.publish(HealthRetrievalFailed(instance_id, endpoint, exc))
            return

        logger.info("Retrieved health information for application instance [%s]", instance_id)
        self._bus.publish(HealthRetrieved(instance_id, health))

    async def _fetch(self, endpoint: str) -> Health:
        resp = await self._client.get(endpoint, headers={"Accept": "application/json"})
        resp.raise_for_status()
        payload: Any = resp.json()
        return Health.model_validate(payload)
