"""
MS Dashboard - health watching for a fleet of registered service instances.

MS Dashboard tracks application instances, polls their advertised health
endpoints and publishes the outcome as events that keep the instance store
up to date.
"""

from msdashboard.constants import SERVER_NAME, SERVER_VERSION

__version__ = SERVER_VERSION
__app_name__ = SERVER_NAME

__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "__version__",
    "__app_name__",
]
