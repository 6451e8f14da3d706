import asyncio
import sys

from healthwatch.core.config import get_settings
from healthwatch.core.exceptions import GateError, ReadyTimeoutError
from healthwatch.core.logging import configure_logging
from healthwatch.integrations.health.client import HealthClient
from healthwatch.services.gate import prepare_service
from healthwatch.services.waiter import wait_for_ready


async def main() -> int:
    settings = get_settings()
    configure_logging(settings.log_level)

    gate_mode = "--gate" in sys.argv[1:]
    print(f"--- Waiting for {settings.base_url} ---")

    async with HealthClient.from_settings(settings) as client:
        try:
            if gate_mode:
                report = await prepare_service(
                    client, settings.wait_max, settings.wait_poll_interval
                )
                if report.warning:
                    print(f"⚠️ {report.warning}")
                print(f"✅ {report.service} is live after {report.waited:.1f}s")
            else:
                waited = await wait_for_ready(
                    client, settings.wait_max, settings.wait_poll_interval
                )
                print(f"✅ Service ready after {waited:.1f}s")
        except (ReadyTimeoutError, GateError) as e:
            print(f"❌ {e}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
