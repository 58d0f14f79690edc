"""Instance storage contract and the default in-memory implementation."""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Protocol

from msdashboard.instances.models import ApplicationInstance

logger = logging.getLogger(__name__)


class InstanceStore(Protocol):
    """Repository of :class:`ApplicationInstance` objects keyed by id.

    A single :meth:`save` for a given id is atomic.  Nothing else is
    guaranteed; concurrent saves for different ids need no coordination.
    """

    def get_by_id(self, instance_id: str) -> Optional[ApplicationInstance]:
        """Return the stored instance or ``None`` when the id is unknown."""

    def get_all(self) -> List[ApplicationInstance]:
        """Return a snapshot of every stored instance, in no particular order."""

    def save(self, instance: ApplicationInstance) -> ApplicationInstance:
        """Insert or replace the instance with the same id and return it."""


class InMemoryInstanceStore:
    """Dict-backed :class:`InstanceStore`.

    Instances are copied on the way in and on the way out, so changes made
    to a returned object only become visible to other readers once they are
    passed back through :meth:`save`.
    """

    def __init__(self) -> None:
        self._instances: Dict[str, ApplicationInstance] = {}
        self._lock = threading.Lock()
        self._save_count = 0

    @property
    def save_count(self) -> int:
        """Number of :meth:`save` calls since creation."""
        return self._save_count

    def get_by_id(self, instance_id: str) -> Optional[ApplicationInstance]:
        with self._lock:
            stored = self._instances.get(instance_id)
        return stored.copy() if stored is not None else None

    def get_all(self) -> List[ApplicationInstance]:
        with self._lock:
            snapshot = list(self._instances.values())
        return [inst.copy() for inst in snapshot]

    def save(self, instance: ApplicationInstance) -> ApplicationInstance:
        stored = instance.copy()
        with self._lock:
            self._instances[stored.id] = stored
            self._save_count += 1
        logger.debug(
            "Saved application instance [%s] (status=%s)",
            stored.id,
            stored.health_status.value,
        )
        return stored.copy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)
