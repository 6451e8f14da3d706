from __future__ import annotations

from typing import Protocol

from healthwatch.schemas import HealthStatus, ReadinessStatus


class StatusProbe(Protocol):
    """Liveness/readiness probe interface.

    The monitor and the waiters depend on this protocol only, so tests and
    embedders can pass any object that answers the four calls.
    """

    async def check_health(self, timeout: float | None = None) -> HealthStatus:
        """Probe liveness. Raises ProbeError subclasses on failure."""
        ...

    async def check_readiness(self, timeout: float | None = None) -> ReadinessStatus:
        """Probe readiness. A not-ready service is a normal return value."""
        ...

    async def is_healthy(self) -> bool:
        """True when the liveness probe succeeds with status ok."""
        ...

    async def is_ready(self) -> bool:
        """True when the readiness probe succeeds with status ready."""
        ...
