"""Application instances: entity, storage, directory and registration."""

from msdashboard.instances.directory import InstanceDirectory
from msdashboard.instances.models import (
    ApplicationInstance,
    Health,
    HealthStatus,
    ServiceInstance,
)
from msdashboard.instances.registrar import InstanceRegistrar
from msdashboard.instances.store import InMemoryInstanceStore, InstanceStore

__all__ = [
    "ApplicationInstance",
    "Health",
    "HealthStatus",
    "InMemoryInstanceStore",
    "InstanceDirectory",
    "InstanceRegistrar",
    "InstanceStore",
    "ServiceInstance",
]
