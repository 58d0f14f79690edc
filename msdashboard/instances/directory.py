"""Use-case facade over an :class:`InstanceStore`."""

from __future__ import annotations

import logging
from typing import List, Optional

from msdashboard.errors import InstanceNotFoundError
from msdashboard.instances.models import ApplicationInstance, HealthStatus, ServiceInstance
from msdashboard.instances.store import InstanceStore

logger = logging.getLogger(__name__)


class InstanceDirectory:
    """Application service for reading and updating application instances.

    Parameters
    ----------
    store:
        The backing :class:`InstanceStore`.
    """

    def __init__(self, store: InstanceStore) -> None:
        self._store = store

    def find_for_source(self, source: ServiceInstance) -> Optional[ApplicationInstance]:
        """Look up the instance for *source*; never creates one."""
        return self._store.get_by_id(source.instance_id)

    def create_from_source(self, source: ServiceInstance) -> ApplicationInstance:
        """Build an instance from *source* and persist it.

        No deduplication happens here: callers decide whether creation is
        warranted, typically after :meth:`find_for_source` returned ``None``.
        """
        instance = self._store.save(ApplicationInstance.from_source(source))
        logger.info(
            "Created application instance [%s] (%d endpoint(s))",
            instance.id,
            len(instance.endpoints),
        )
        return instance

    def list_all(self) -> List[ApplicationInstance]:
        return self._store.get_all()

    def get(self, instance_id: str) -> ApplicationInstance:
        instance = self._store.get_by_id(instance_id)
        if instance is None:
            raise InstanceNotFoundError(instance_id)
        return instance

    def update_health(self, instance_id: str, status: HealthStatus) -> ApplicationInstance:
        """Change the health status of an instance and persist it.

        This is the only path by which health reaches the store.

        Raises:
            InstanceNotFoundError: If *instance_id* is unknown.
        """
        instance = self.get(instance_id)
        old_status = instance.health_status
        instance.update_health_status(status)
        saved = self._store.save(instance)
        if old_status != saved.health_status:
            logger.info(
                "[%s] Health changed %s -> %s",
                instance_id,
                old_status.value,
                saved.health_status.value,
            )
        return saved
