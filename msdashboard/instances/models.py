"""Application instance entity and health value types.

An :class:`ApplicationInstance` is built once from the metadata of a
:class:`ServiceInstance` and afterwards only its health status changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from msdashboard.constants import ENDPOINTS_METADATA_KEY, HEALTH_ENDPOINT


class HealthStatus(str, Enum):
    """Health status reported by an instance's health endpoint."""

    UP = "UP"
    DOWN = "DOWN"
    UNKNOWN = "UNKNOWN"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"


class Health(BaseModel):
    """Body returned by a health endpoint: ``{"status": ..., "details": {...}}``."""

    status: HealthStatus
    details: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("details", mode="before")
    @classmethod
    def _null_details(cls, v: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {} if v is None else v

    @classmethod
    def up(cls, **details: Any) -> Health:
        return cls(status=HealthStatus.UP, details=details)

    @classmethod
    def down(cls, **details: Any) -> Health:
        return cls(status=HealthStatus.DOWN, details=details)


@dataclass(frozen=True)
class ServiceInstance:
    """Externally supplied metadata of one running service instance.

    The endpoint map, when present, lives under the ``"endpoints"`` metadata
    key as a mapping of logical endpoint name to absolute URI.
    """

    instance_id: str
    uri: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def endpoints(self) -> Dict[str, str]:
        raw = self.metadata.get(ENDPOINTS_METADATA_KEY) or {}
        if not isinstance(raw, Mapping):
            return {}
        return {
            str(name): uri for name, uri in raw.items() if isinstance(uri, str) and uri
        }


class ApplicationInstance:
    """One monitored deployment of a service, identified by a stable id.

    ``id``, ``uri`` and ``endpoints`` are fixed at construction.  The health
    status is the only mutable state and changes through
    :meth:`update_health_status`; persisting the change is up to the caller.
    """

    __slots__ = ("_id", "_uri", "_endpoints", "_health_status")

    def __init__(
        self,
        instance_id: str,
        uri: str,
        endpoints: Mapping[str, str] | None = None,
        health_status: HealthStatus = HealthStatus.UNKNOWN,
    ) -> None:
        if not instance_id:
            raise ValueError("instance_id must not be blank")
        self._id = instance_id
        self._uri = uri
        self._endpoints: Mapping[str, str] = MappingProxyType(dict(endpoints or {}))
        self._health_status = health_status

    @classmethod
    def from_source(cls, source: ServiceInstance) -> ApplicationInstance:
        """Build a new instance from service metadata (status ``UNKNOWN``)."""
        return cls(source.instance_id, source.uri, source.endpoints())

    @property
    def id(self) -> str:
        return self._id

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def endpoints(self) -> Mapping[str, str]:
        return self._endpoints

    @property
    def health_status(self) -> HealthStatus:
        return self._health_status

    @property
    def health_endpoint(self) -> str | None:
        return self._endpoints.get(HEALTH_ENDPOINT)

    def has_health_endpoint(self) -> bool:
        return bool(self.health_endpoint)

    def update_health_status(self, status: HealthStatus) -> None:
        self._health_status = HealthStatus(status)

    def copy(self) -> ApplicationInstance:
        return ApplicationInstance(self._id, self._uri, self._endpoints, self._health_status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self._id,
            "uri": self._uri,
            "endpoints": dict(self._endpoints),
            "health_status": self._health_status.value,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApplicationInstance):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"ApplicationInstance(id={self._id!r}, uri={self._uri!r}, "
            f"health_status={self._health_status.value})"
        )
