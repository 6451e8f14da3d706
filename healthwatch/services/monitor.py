from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from healthwatch.integrations.health.base import StatusProbe
from healthwatch.schemas import HealthStatus, ReadinessStatus

logger = logging.getLogger(__name__)

HealthCallback = Callable[[HealthStatus], Awaitable[None] | None]
ReadinessCallback = Callable[[ReadinessStatus], Awaitable[None] | None]


class HealthMonitor:
    """Polls a probe on a fixed interval and reports every result.

    Nothing runs until ``start()`` is called; the owner must ``stop()`` it.
    Each instance keeps its own state, so several monitors can watch
    different services (or the same one at different rates) side by side.
    """

    def __init__(self, probe: StatusProbe, interval: float = 30.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.probe = probe
        self.interval = interval

        self.last_health: HealthStatus | None = None
        self.last_readiness: ReadinessStatus | None = None
        self.ticks = 0

        self._running = False
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def _deliver(
        self,
        callback: Callable[[Any], Awaitable[None] | None],
        status: HealthStatus | ReadinessStatus,
    ) -> None:
        try:
            result = callback(status)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(f"Status callback {callback!r} failed")

    async def tick(
        self, on_health_change: HealthCallback, on_readiness_change: ReadinessCallback
    ) -> None:
        """Run one observation cycle: health probe, then readiness if alive."""
        try:
            health = await self.probe.check_health()
        except Exception as e:
            logger.warning(f"Health probe failed: {e!r}")
            await self._report_failure(on_health_change)
            # Readiness is not probed on a tick whose health probe failed
            return

        self.last_health = health
        await self._deliver(on_health_change, health)

        try:
            readiness = await self.probe.check_readiness()
        except Exception as e:
            logger.warning(f"Readiness probe failed: {e!r}")
            await self._report_failure(on_health_change)
            return

        self.last_readiness = readiness
        await self._deliver(on_readiness_change, readiness)

    async def _report_failure(self, on_health_change: HealthCallback) -> None:
        self.last_health = HealthStatus.failed()
        await self._deliver(on_health_change, self.last_health)

    async def _run(
        self,
        on_health_change: HealthCallback,
        on_readiness_change: ReadinessCallback,
        interval: float,
    ) -> None:
        logger.info(f"Health monitoring started (every {interval:g}s)")
        while self._running:
            await self.tick(on_health_change, on_readiness_change)
            self.ticks += 1
            # Delay counts from the end of the tick, not from its start
            await asyncio.sleep(interval)
        logger.info(f"Health monitoring stopped after {self.ticks} ticks")

    def start(
        self,
        on_health_change: HealthCallback,
        on_readiness_change: ReadinessCallback,
        interval: float | None = None,
    ) -> asyncio.Task[None]:
        """Start polling in a background task and return its handle.

        Must be called from a running event loop. Raises RuntimeError if the
        previous loop of this monitor has not finished yet.
        """
        if self._task is not None and not self._task.done():
            raise RuntimeError("Health monitor is already running")

        period = self.interval if interval is None else interval
        if period <= 0:
            raise ValueError("interval must be positive")

        self._running = True
        self._task = asyncio.create_task(
            self._run(on_health_change, on_readiness_change, period),
            name=f"health-monitor-{id(self):x}",
        )
        return self._task

    def stop(self) -> None:
        """Ask the loop to exit before its next tick. Safe to call repeatedly.

        A tick or sleep already in progress runs to completion.
        """
        self._running = False

    async def wait_closed(self) -> None:
        """Wait until the loop task has exited after ``stop()``."""
        if self._task is not None:
            await self._task

    @asynccontextmanager
    async def running_with(
        self,
        on_health_change: HealthCallback,
        on_readiness_change: ReadinessCallback,
        interval: float | None = None,
    ) -> AsyncIterator[HealthMonitor]:
        """Run the monitor for the duration of an ``async with`` block."""
        self.start(on_health_change, on_readiness_change, interval)
        try:
            yield self
        finally:
            self.stop()
            await self.wait_closed()
