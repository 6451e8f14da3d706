from __future__ import annotations

from enum import StrEnum


class HealthState(StrEnum):
    OK = "ok"
    ERROR = "error"


class ReadinessState(StrEnum):
    READY = "ready"
    NOT_READY = "not_ready"


class DependencyState(StrEnum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class IndicatorColor(StrEnum):
    GRAY = "gray"
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
