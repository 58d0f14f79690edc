"""Configuration loading and validation for MS Dashboard."""

from msdashboard.config.loader import expand_env_vars, load_config
from msdashboard.config.schema import (
    DashboardConfig,
    HealthSettings,
    InstanceConfig,
    ServerSettings,
)

__all__ = [
    "DashboardConfig",
    "HealthSettings",
    "InstanceConfig",
    "ServerSettings",
    "expand_env_vars",
    "load_config",
]
