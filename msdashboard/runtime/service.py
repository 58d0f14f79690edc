"""Dashboard runtime service: wires the health-watching components together.

DashboardService owns the store, directory, event bus, watcher, registrar
and sweep scheduler, and drives their startup/shutdown sequence.  Health
outcomes are also recorded in a bounded buffer for the management API.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

import httpx

from msdashboard.config.schema import DashboardConfig
from msdashboard.events.bus import EventBus
from msdashboard.events.models import HealthRetrievalFailed, HealthRetrieved, InstanceCreated
from msdashboard.health.scheduler import HealthSweepScheduler
from msdashboard.health.watcher import HealthWatcher
from msdashboard.instances.directory import InstanceDirectory
from msdashboard.instances.registrar import InstanceRegistrar
from msdashboard.instances.store import InMemoryInstanceStore, InstanceStore

logger = logging.getLogger(__name__)

_EVENT_BUFFER_SIZE = 500


class DashboardService:
    """Manages the lifecycle of the health-watching pipeline.

    Usage::

        service = DashboardService(config)
        await service.start()
        # ... sweeps run in the background ...
        await service.stop()

    Parameters
    ----------
    config:
        Validated :class:`DashboardConfig`.
    store:
        Optional :class:`InstanceStore`; defaults to an in-memory store.
    client:
        Optional ``httpx.AsyncClient`` for health requests.  When omitted
        one is created from ``config.health.timeout`` and closed on stop.
    """

    def __init__(
        self,
        config: DashboardConfig,
        *,
        store: Optional[InstanceStore] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=config.health.timeout)
        self._client = client

        self.store: InstanceStore = store if store is not None else InMemoryInstanceStore()
        self.bus = EventBus()
        self.directory = InstanceDirectory(self.store)
        self.watcher = HealthWatcher(self.directory, self._client, self.bus)
        self.registrar = InstanceRegistrar(self.directory, self.bus)
        self.scheduler = HealthSweepScheduler(self.watcher, interval=config.health.interval)

        self._events: Deque[Dict[str, Any]] = deque(maxlen=_EVENT_BUFFER_SIZE)
        self._event_id_counter = 0
        self._started_at: Optional[datetime] = None

        self.watcher.register(self.bus)
        self.bus.subscribe(InstanceCreated, self._record_created)
        self.bus.subscribe(HealthRetrieved, self._record_retrieved)
        self.bus.subscribe(HealthRetrievalFailed, self._record_failed)

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    @property
    def is_running(self) -> bool:
        return self.scheduler.running

    # ------------------------------------------------------------------ #
    #  Lifecycle
    # ------------------------------------------------------------------ #

    async def start(self) -> None:
        """Register configured instances and start periodic sweeps."""
        logger.info(
            "Starting dashboard service (%d configured instance(s))",
            len(self._config.instances),
        )
        self.registrar.register_all(self._config.sources())
        self.scheduler.start()
        self._started_at = datetime.now(timezone.utc)

    async def stop(self) -> None:
        """Stop sweeping, let in-flight polls finish and release the client."""
        await self.scheduler.stop()
        await self.watcher.wait_idle()
        await self.bus.join()
        if self._owns_client:
            await self._client.aclose()
        logger.info("Dashboard service stopped.")

    # ------------------------------------------------------------------ #
    #  Event log
    # ------------------------------------------------------------------ #

    def _record(self, kind: str, instance_id: str, details: Dict[str, Any]) -> None:
        self._event_id_counter += 1
        self._events.append(
            {
                "id": f"evt-{self._event_id_counter}",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "type": kind,
                "instance_id": instance_id,
                "details": details,
            }
        )

    def _record_created(self, event: InstanceCreated) -> None:
        self._record("instance_created", event.instance.id, {"uri": event.instance.uri})

    def _record_retrieved(self, event: HealthRetrieved) -> None:
        self._record("health_retrieved", event.instance_id, {"status": event.health.status.value})

    def _record_failed(self, event: HealthRetrievalFailed) -> None:
        self._record(
            "health_retrieval_failed",
            event.instance_id,
            {"endpoint": event.endpoint, "error": f"{type(event.cause).__name__}: {event.cause}"},
        )

    def get_events(
        self,
        *,
        limit: int = 100,
        instance_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Return recent events, optionally filtered by instance."""
        if limit <= 0:
            return []
        result = list(self._events)
        if instance_id:
            result = [e for e in result if e["instance_id"] == instance_id]
        return result[-limit:]
