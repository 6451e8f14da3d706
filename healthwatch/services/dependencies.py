from __future__ import annotations

from healthwatch.schemas import (
    DependencyReport,
    DependencyState,
    DependencyView,
    ReadinessStatus,
)


def dependency_views(readiness: ReadinessStatus) -> list[DependencyView]:
    """Flatten the dependency map into display rows, sorted by name."""
    return [
        DependencyView(
            name=name,
            component=dep.component,
            status=dep.status,
            error=dep.error,
            extras=dep.extras,
        )
        for name, dep in sorted(readiness.dependencies.items())
    ]


def group_dependencies(readiness: ReadinessStatus) -> DependencyReport:
    """Split dependencies into healthy and unhealthy groups for reporting.

    The overall verdict is the server's top-level status. A service may be
    not ready with every listed dependency healthy (or the reverse) and the
    report shows exactly that.
    """
    views = dependency_views(readiness)
    return DependencyReport(
        verdict=readiness.status,
        healthy=[v for v in views if v.status == DependencyState.HEALTHY],
        unhealthy=[v for v in views if v.status == DependencyState.UNHEALTHY],
    )
