from __future__ import annotations

from .common import (
    DependencyState,
    HealthState,
    IndicatorColor,
    ReadinessState,
)
from .health import (
    UNKNOWN_SERVICE,
    DependencyStatus,
    HealthStatus,
    ReadinessStatus,
)
from .indicator import (
    DependencyReport,
    DependencyView,
    IndicatorDetails,
    IndicatorState,
)

__all__ = [
    "UNKNOWN_SERVICE",
    "DependencyReport",
    "DependencyState",
    "DependencyStatus",
    "DependencyView",
    "HealthState",
    "HealthStatus",
    "IndicatorColor",
    "IndicatorDetails",
    "IndicatorState",
    "ReadinessState",
    "ReadinessStatus",
]
