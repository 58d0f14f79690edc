"""Events published around the application instance lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from msdashboard.instances.models import ApplicationInstance, Health


@dataclass(frozen=True)
class InstanceCreated:
    """A new application instance was created and persisted."""

    instance: ApplicationInstance


@dataclass(frozen=True)
class HealthRetrieved:
    """Health data was fetched from an instance's health endpoint."""

    instance_id: str
    health: Health


@dataclass(frozen=True)
class HealthRetrievalFailed:
    """A health fetch failed.

    *cause* is whatever the transport or payload parsing raised; network
    errors, non-2xx responses and malformed bodies are not distinguished.
    """

    instance_id: str
    endpoint: str
    cause: BaseException
