import asyncio
import contextlib

from healthwatch.core.config import get_settings
from healthwatch.core.logging import configure_logging
from healthwatch.integrations.health.client import HealthClient
from healthwatch.schemas import HealthStatus, ReadinessStatus
from healthwatch.services.dependencies import group_dependencies
from healthwatch.services.monitor import HealthMonitor
from healthwatch.services.presenter import present


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    print(f"--- Watching {settings.base_url} every {settings.monitor_interval:g}s ---")

    async with HealthClient.from_settings(settings) as client:
        monitor = HealthMonitor(client, interval=settings.monitor_interval)

        def on_health(health: HealthStatus) -> None:
            state = present(health, monitor.last_readiness)
            print(f"[{health.timestamp:%H:%M:%S}] {state.color.upper():6} {state.label}")

        def on_readiness(readiness: ReadinessStatus) -> None:
            state = present(monitor.last_health, readiness)
            report = group_dependencies(readiness)
            print(
                f"[{readiness.timestamp:%H:%M:%S}] {state.color.upper():6} {state.label} "
                f"({len(report.healthy)}/{report.total} dependencies healthy)"
            )
            for dep in report.unhealthy:
                print(f"    {dep.name} ({dep.component}): {dep.error or dep.status}")

        monitor.start(on_health, on_readiness)
        try:
            await asyncio.Event().wait()
        finally:
            monitor.stop()


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())
