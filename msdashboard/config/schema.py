"""Pydantic configuration models for MS Dashboard."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator

from msdashboard.constants import (
    DEFAULT_HEALTH_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_SWEEP_INTERVAL,
    ENDPOINTS_METADATA_KEY,
)
from msdashboard.instances.models import ServiceInstance


class ServerSettings(BaseModel):
    """Management API bind settings."""

    host: str = Field(default=DEFAULT_HOST, min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)


class HealthSettings(BaseModel):
    """Health polling settings."""

    interval: float = Field(
        default=DEFAULT_SWEEP_INTERVAL,
        gt=0,
        description="Seconds between health sweeps.",
    )
    timeout: float = Field(
        default=DEFAULT_HEALTH_TIMEOUT,
        gt=0,
        description="Per-request timeout for health endpoint calls in seconds.",
    )


class InstanceConfig(BaseModel):
    """A statically configured service instance."""

    id: str = Field(..., min_length=1)
    uri: str = Field(..., min_length=1)
    endpoints: Dict[str, str] = Field(
        default_factory=dict,
        description="Logical endpoint name to absolute URI, e.g. 'health'.",
    )

    @field_validator("id", "uri", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    def to_source(self) -> ServiceInstance:
        metadata = {ENDPOINTS_METADATA_KEY: dict(self.endpoints)} if self.endpoints else {}
        return ServiceInstance(instance_id=self.id, uri=self.uri, metadata=metadata)


class DashboardConfig(BaseModel):
    """Top-level configuration file model."""

    server: ServerSettings = Field(default_factory=ServerSettings)
    health: HealthSettings = Field(default_factory=HealthSettings)
    instances: List[InstanceConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_instance_ids(self) -> DashboardConfig:
        seen: set[str] = set()
        for inst in self.instances:
            if inst.id in seen:
                raise ValueError(f"Duplicate instance id '{inst.id}'")
            seen.add(inst.id)
        return self

    def sources(self) -> List[ServiceInstance]:
        return [inst.to_source() for inst in self.instances]
