"""Registration of observed service instances.

Turns externally supplied :class:`ServiceInstance` metadata into
application instances, publishing :class:`InstanceCreated` the first time an
id is seen.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from msdashboard.events.bus import EventBus
from msdashboard.events.models import InstanceCreated
from msdashboard.instances.directory import InstanceDirectory
from msdashboard.instances.models import ApplicationInstance, ServiceInstance

logger = logging.getLogger(__name__)


class InstanceRegistrar:
    """Find-or-create front door for instance registration sources."""

    def __init__(self, directory: InstanceDirectory, bus: EventBus) -> None:
        self._directory = directory
        self._bus = bus

    def register(self, source: ServiceInstance) -> ApplicationInstance:
        """Return the instance for *source*, creating it if it is new.

        Only a creation publishes :class:`InstanceCreated`.
        """
        existing = self._directory.find_for_source(source)
        if existing is not None:
            logger.debug("[%s] Already registered", source.instance_id)
            return existing

        instance = self._directory.create_from_source(source)
        self._bus.publish(InstanceCreated(instance))
        return instance

    def register_all(self, sources: Iterable[ServiceInstance]) -> List[ApplicationInstance]:
        instances = [self.register(source) for source in sources]
        logger.info("Registered %d service instance(s)", len(instances))
        return instances
