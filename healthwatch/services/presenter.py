from __future__ import annotations

from healthwatch.schemas import (
    UNKNOWN_SERVICE,
    HealthState,
    HealthStatus,
    IndicatorColor,
    IndicatorDetails,
    IndicatorState,
    ReadinessState,
    ReadinessStatus,
)
from healthwatch.services.dependencies import dependency_views

CHECKING = IndicatorState(color=IndicatorColor.GRAY, label="Checking...")
SERVICE_DOWN = IndicatorState(color=IndicatorColor.RED, label="Service Down")
SERVICE_STARTING = IndicatorState(color=IndicatorColor.YELLOW, label="Service Starting")
SERVICE_HEALTHY = IndicatorState(color=IndicatorColor.GREEN, label="Service Healthy")
UNKNOWN_STATUS = IndicatorState(color=IndicatorColor.GRAY, label="Unknown Status")


def present(health: HealthStatus | None, readiness: ReadinessStatus | None) -> IndicatorState:
    """Map the latest probe pair to an indicator state. First matching rule wins."""
    if health is None or readiness is None:
        return CHECKING
    if health.status == HealthState.ERROR:
        return SERVICE_DOWN
    if readiness.status == ReadinessState.NOT_READY:
        return SERVICE_STARTING
    if health.status == HealthState.OK and readiness.status == ReadinessState.READY:
        return SERVICE_HEALTHY
    return UNKNOWN_STATUS


def describe(health: HealthStatus | None, readiness: ReadinessStatus | None) -> IndicatorDetails:
    """Detail panel contents: raw states, service name, last update, dependencies."""
    service = (health and health.service) or (readiness and readiness.service) or UNKNOWN_SERVICE
    return IndicatorDetails(
        health=health.status if health else None,
        readiness=readiness.status if readiness else None,
        service=service,
        updated_at=health.timestamp if health else None,
        dependencies=dependency_views(readiness) if readiness else [],
    )


def should_hide(
    health: HealthStatus | None, readiness: ReadinessStatus | None, auto_hide: bool = True
) -> bool:
    """An auto-hiding indicator disappears only while everything is green."""
    return auto_hide and present(health, readiness) == SERVICE_HEALTHY
