from __future__ import annotations

import logging
from dataclasses import dataclass

from healthwatch.core.exceptions import GateError, ProbeError
from healthwatch.integrations.health.base import StatusProbe
from healthwatch.schemas import HealthState, ReadinessState, ReadinessStatus
from healthwatch.services.dependencies import group_dependencies
from healthwatch.services.waiter import wait_for_live

logger = logging.getLogger(__name__)


@dataclass
class GateReport:
    service: str
    waited: float
    ready: bool
    readiness: ReadinessStatus | None = None
    warning: str | None = None


async def prepare_service(
    probe: StatusProbe, max_wait: float = 60.0, poll_interval: float = 2.0
) -> GateReport:
    """Gate a test run on the monitored service.

    Waits for liveness, then requires a healthy ``/healthz``. Readiness is
    checked too, but a not-ready or failing ``/readyz`` only produces a
    warning: dependencies may legitimately be down in a test environment.
    """
    logger.info("Waiting for service to be live...")
    waited = await wait_for_live(probe, max_wait, poll_interval)

    try:
        health = await probe.check_health()
    except ProbeError as e:
        raise GateError(f"Health endpoint verification failed: {e}") from e
    if health.status != HealthState.OK:
        raise GateError(f"Health endpoint reported {health.status}")
    logger.info(f"Health endpoint verified for {health.service}")

    try:
        readiness = await probe.check_readiness()
    except ProbeError as e:
        warning = f"Readiness endpoint check failed: {e}"
        logger.warning(warning)
        return GateReport(service=health.service, waited=waited, ready=False, warning=warning)

    if readiness.status == ReadinessState.READY:
        logger.info("Readiness endpoint verified")
        return GateReport(service=health.service, waited=waited, ready=True, readiness=readiness)

    report = group_dependencies(readiness)
    failing = ", ".join(v.name for v in report.unhealthy) or "none reported"
    warning = f"Service is not ready - unhealthy dependencies: {failing}"
    logger.warning(warning)
    return GateReport(
        service=health.service,
        waited=waited,
        ready=False,
        readiness=readiness,
        warning=warning,
    )
