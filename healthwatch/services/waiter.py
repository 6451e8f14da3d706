from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from healthwatch.core.exceptions import ReadyTimeoutError
from healthwatch.integrations.health.base import StatusProbe

logger = logging.getLogger(__name__)


async def _wait_until(
    check: Callable[[], Awaitable[bool]],
    max_wait: float,
    poll_interval: float,
    what: str,
) -> float:
    """Poll ``check`` until it returns True; return the seconds it took.

    The first attempt runs immediately. The loop is bounded by elapsed time,
    not by attempt count, and a failing check only means "not yet".
    """
    if max_wait <= 0 or poll_interval <= 0:
        raise ValueError("max_wait and poll_interval must be positive")

    start = time.monotonic()
    attempts = 0

    while time.monotonic() - start < max_wait:
        attempts += 1
        try:
            if await check():
                elapsed = time.monotonic() - start
                logger.info(f"Service is {what} after {elapsed:.1f}s ({attempts} attempts)")
                return elapsed
        except Exception as e:
            logger.debug(f"{what} check raised {e!r}, retrying")

        remaining = max_wait - (time.monotonic() - start)
        if remaining <= 0:
            break
        logger.debug(f"Service not {what} yet, next check in {poll_interval:g}s")
        # The last sleep never overshoots the budget
        await asyncio.sleep(min(poll_interval, remaining))

    raise ReadyTimeoutError(max_wait, attempts, what)


async def wait_for_ready(
    probe: StatusProbe, max_wait: float = 60.0, poll_interval: float = 2.0
) -> float:
    """Block until the service reports ready or raise ReadyTimeoutError."""
    return await _wait_until(probe.is_ready, max_wait, poll_interval, "ready")


async def wait_for_live(
    probe: StatusProbe, max_wait: float = 60.0, poll_interval: float = 2.0
) -> float:
    """Block until the liveness probe passes or raise ReadyTimeoutError."""
    return await _wait_until(probe.is_healthy, max_wait, poll_interval, "live")
