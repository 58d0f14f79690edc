"""Custom exception classes for MS Dashboard."""


class DashboardError(Exception):
    """Base class for all custom exceptions in MS Dashboard."""

    pass


class ConfigurationError(DashboardError):
    """Raised when loading or validating the configuration file fails."""

    pass


class InstanceNotFoundError(DashboardError):
    """Raised when an application instance id is unknown to the directory."""

    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Application instance not found: {instance_id}")
