from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .common import DependencyState, HealthState, IndicatorColor, ReadinessState


class IndicatorState(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: IndicatorColor
    label: str


class DependencyView(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    component: str
    status: DependencyState
    error: str | None = None
    extras: dict[str, Any] = Field(default_factory=dict)


class DependencyReport(BaseModel):
    # Copied from the server's top-level readiness status
    verdict: ReadinessState
    healthy: list[DependencyView]
    unhealthy: list[DependencyView]

    @property
    def total(self) -> int:
        return len(self.healthy) + len(self.unhealthy)


class IndicatorDetails(BaseModel):
    health: HealthState | None = None
    readiness: ReadinessState | None = None
    service: str
    updated_at: datetime | None = None
    dependencies: list[DependencyView]
