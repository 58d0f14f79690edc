"""Health watching package.

Public API
----------
- :class:`HealthWatcher`: Event-driven async health poller
- :class:`HealthSweepScheduler`: Periodic sweep driver
"""

from msdashboard.health.scheduler import HealthSweepScheduler
from msdashboard.health.watcher import HealthWatcher

__all__ = [
    "HealthSweepScheduler",
    "HealthWatcher",
]
