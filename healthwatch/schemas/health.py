from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from .common import DependencyState, HealthState, ReadinessState

UNKNOWN_SERVICE = "unknown"

# Go's RFC 3339 timestamps carry nanoseconds; datetime holds microseconds
_SUBMICRO_DIGITS = re.compile(r"(\.\d{6})\d+")


def _trim_fraction(value: Any) -> Any:
    if isinstance(value, str):
        return _SUBMICRO_DIGITS.sub(r"\1", value, count=1)
    return value


class HealthStatus(BaseModel):
    """Body of ``GET /healthz``."""

    model_config = ConfigDict(frozen=True)

    status: HealthState
    timestamp: datetime
    service: str

    @field_validator("timestamp", mode="before")
    @classmethod
    def trim_timestamp(cls, value: Any) -> Any:
        return _trim_fraction(value)

    @classmethod
    def failed(cls) -> HealthStatus:
        """Synthetic status reported when a health probe yields nothing usable."""
        return cls(
            status=HealthState.ERROR,
            timestamp=datetime.now(UTC),
            service=UNKNOWN_SERVICE,
        )


class DependencyStatus(BaseModel):
    """One entry of the readiness dependency map.

    Servers attach component specific fields (connection pool stats, missing
    env vars, notes); they are kept as-is.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    component: str
    status: DependencyState
    error: str | None = None

    @property
    def extras(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class ReadinessStatus(BaseModel):
    """Body of ``GET /readyz``, sent with both 200 and 503."""

    model_config = ConfigDict(frozen=True)

    status: ReadinessState
    timestamp: datetime
    service: str
    dependencies: dict[str, DependencyStatus]

    @field_validator("timestamp", mode="before")
    @classmethod
    def trim_timestamp(cls, value: Any) -> Any:
        return _trim_fraction(value)
