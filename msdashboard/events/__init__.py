"""In-process events and the bus that delivers them."""

from msdashboard.events.bus import EventBus
from msdashboard.events.models import HealthRetrievalFailed, HealthRetrieved, InstanceCreated

__all__ = [
    "EventBus",
    "HealthRetrievalFailed",
    "HealthRetrieved",
    "InstanceCreated",
]
