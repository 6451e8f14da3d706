from __future__ import annotations

import asyncio

import pytest

from healthwatch.core.exceptions import HttpError, NetworkError, ProbeTimeoutError
from healthwatch.integrations.health.client import HealthClient
from healthwatch.schemas import (
    UNKNOWN_SERVICE,
    HealthState,
    HealthStatus,
    ReadinessState,
    ReadinessStatus,
)
from healthwatch.services.monitor import HealthMonitor
from tests.fake_service import FakeProbe, FakeServiceState


class Recorder:
    def __init__(self) -> None:
        self.health: list[HealthStatus] = []
        self.readiness: list[ReadinessStatus] = []

    def on_health(self, status: HealthStatus) -> None:
        self.health.append(status)

    def on_readiness(self, status: ReadinessStatus) -> None:
        self.readiness.append(status)


# ---------------------------------------------------------------------------
# Single tick
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_tick_probes_health_then_readiness() -> None:
    probe = FakeProbe()
    monitor = HealthMonitor(probe, interval=1.0)
    rec = Recorder()

    await monitor.tick(rec.on_health, rec.on_readiness)

    assert probe.calls == ["health", "readiness"]
    assert rec.health[0].status == HealthState.OK
    assert rec.readiness[0].status == ReadinessState.READY
    assert monitor.last_health == rec.health[0]
    assert monitor.last_readiness == rec.readiness[0]


@pytest.mark.asyncio
async def test_tick_delivers_not_ready_readiness() -> None:
    monitor = HealthMonitor(FakeProbe(ready=False), interval=1.0)
    rec = Recorder()

    await monitor.tick(rec.on_health, rec.on_readiness)

    assert rec.readiness[0].status == ReadinessState.NOT_READY


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [HttpError(500), NetworkError("refused"), ProbeTimeoutError(5.0), RuntimeError("boom")],
)
async def test_health_failure_synthesizes_error_and_skips_readiness(error: Exception) -> None:
    probe = FakeProbe(health_error=error)
    monitor = HealthMonitor(probe, interval=1.0)
    rec = Recorder()

    await monitor.tick(rec.on_health, rec.on_readiness)

    assert probe.calls == ["health"]
    assert len(rec.health) == 1
    assert rec.health[0].status == HealthState.ERROR
    assert rec.health[0].service == UNKNOWN_SERVICE
    assert rec.readiness == []


@pytest.mark.asyncio
async def test_readiness_failure_reports_error_health() -> None:
    probe = FakeProbe(readiness_error=NetworkError("reset by peer"))
    monitor = HealthMonitor(probe, interval=1.0)
    rec = Recorder()

    await monitor.tick(rec.on_health, rec.on_readiness)

    assert [h.status for h in rec.health] == [HealthState.OK, HealthState.ERROR]
    assert rec.readiness == []
    assert monitor.last_readiness is None


@pytest.mark.asyncio
async def test_async_callbacks_are_awaited() -> None:
    monitor = HealthMonitor(FakeProbe(), interval=1.0)
    seen: list[str] = []

    async def on_health(status: HealthStatus) -> None:
        await asyncio.sleep(0)
        seen.append(f"health:{status.status}")

    async def on_readiness(status: ReadinessStatus) -> None:
        seen.append(f"readiness:{status.status}")

    await monitor.tick(on_health, on_readiness)

    assert seen == ["health:ok", "readiness:ready"]


@pytest.mark.asyncio
async def test_callback_error_does_not_stop_tick() -> None:
    monitor = HealthMonitor(FakeProbe(), interval=1.0)
    rec = Recorder()

    def broken(status: HealthStatus) -> None:
        raise ValueError("render failed")

    await monitor.tick(broken, rec.on_readiness)

    assert len(rec.readiness) == 1


# ---------------------------------------------------------------------------
# Loop lifecycle
# ---------------------------------------------------------------------------


def test_monitor_does_not_start_on_construction() -> None:
    probe = FakeProbe()
    monitor = HealthMonitor(probe, interval=0.01)

    assert monitor.running is False
    assert probe.calls == []


def test_monitor_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        HealthMonitor(FakeProbe(), interval=0)


@pytest.mark.asyncio
async def test_loop_repeats_until_stopped() -> None:
    monitor = HealthMonitor(FakeProbe(), interval=0.01)
    rec = Recorder()

    monitor.start(rec.on_health, rec.on_readiness)
    await asyncio.sleep(0.1)
    monitor.stop()
    await monitor.wait_closed()

    assert monitor.running is False
    assert monitor.ticks >= 3
    assert len(rec.health) == monitor.ticks
    assert len(rec.readiness) == monitor.ticks


@pytest.mark.asyncio
async def test_stop_immediately_after_start_runs_at_most_one_tick() -> None:
    monitor = HealthMonitor(FakeProbe(), interval=0.01)
    rec = Recorder()

    monitor.start(rec.on_health, rec.on_readiness)
    monitor.stop()
    await monitor.wait_closed()

    assert monitor.ticks <= 1
    assert len(rec.health) <= 1


@pytest.mark.asyncio
async def test_stop_lets_in_flight_tick_finish() -> None:
    monitor = HealthMonitor(FakeProbe(delay=0.05), interval=0.01)
    rec = Recorder()

    monitor.start(rec.on_health, rec.on_readiness)
    await asyncio.sleep(0.02)  # health probe in flight
    monitor.stop()
    await monitor.wait_closed()

    assert monitor.ticks == 1
    assert len(rec.health) == 1
    assert len(rec.readiness) == 1


@pytest.mark.asyncio
async def test_stop_is_idempotent() -> None:
    monitor = HealthMonitor(FakeProbe(), interval=0.01)
    rec = Recorder()

    monitor.stop()
    monitor.start(rec.on_health, rec.on_readiness)
    monitor.stop()
    monitor.stop()
    await monitor.wait_closed()

    assert monitor.running is False


@pytest.mark.asyncio
async def test_start_twice_raises() -> None:
    monitor = HealthMonitor(FakeProbe(), interval=0.01)
    rec = Recorder()

    monitor.start(rec.on_health, rec.on_readiness)
    try:
        with pytest.raises(RuntimeError, match="already running"):
            monitor.start(rec.on_health, rec.on_readiness)
    finally:
        monitor.stop()
        await monitor.wait_closed()


@pytest.mark.asyncio
async def test_restart_after_stop() -> None:
    monitor = HealthMonitor(FakeProbe(), interval=0.01)
    rec = Recorder()

    monitor.start(rec.on_health, rec.on_readiness)
    monitor.stop()
    await monitor.wait_closed()
    monitor.start(rec.on_health, rec.on_readiness)
    await asyncio.sleep(0.03)
    monitor.stop()
    await monitor.wait_closed()

    assert len(rec.health) >= 1


@pytest.mark.asyncio
async def test_running_with_stops_on_exit() -> None:
    monitor = HealthMonitor(FakeProbe(), interval=0.01)
    rec = Recorder()

    async with monitor.running_with(rec.on_health, rec.on_readiness) as running:
        assert running.running is True
        await asyncio.sleep(0.03)

    assert monitor.running is False
    ticks = monitor.ticks
    await asyncio.sleep(0.03)
    assert monitor.ticks == ticks


@pytest.mark.asyncio
async def test_independent_monitors_do_not_interfere() -> None:
    fast_probe = FakeProbe(service="fast")
    slow_probe = FakeProbe(service="slow")
    fast = HealthMonitor(fast_probe, interval=0.02)
    slow = HealthMonitor(slow_probe, interval=0.06)
    fast_rec = Recorder()
    slow_rec = Recorder()

    fast.start(fast_rec.on_health, fast_rec.on_readiness)
    slow.start(slow_rec.on_health, slow_rec.on_readiness)
    await asyncio.sleep(0.6)
    fast.stop()
    slow.stop()
    await asyncio.gather(fast.wait_closed(), slow.wait_closed())

    assert len(fast_rec.health) >= 2 * len(slow_rec.health)
    assert {h.service for h in fast_rec.health} == {"fast"}
    assert {h.service for h in slow_rec.health} == {"slow"}
    assert {r.service for r in slow_rec.readiness} == {"slow"}


# ---------------------------------------------------------------------------
# Against the fake service
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_http_500_scenario(client: HealthClient, service_state: FakeServiceState) -> None:
    service_state.health_code = 500

    with pytest.raises(HttpError) as exc_info:
        await client.check_health()
    assert exc_info.value.status_code == 500

    monitor = HealthMonitor(client, interval=1.0)
    rec = Recorder()
    ready_calls = service_state.ready_calls

    await monitor.tick(rec.on_health, rec.on_readiness)

    assert rec.health[0].status == HealthState.ERROR
    assert rec.health[0].service == UNKNOWN_SERVICE
    assert rec.readiness == []
    assert service_state.ready_calls == ready_calls


@pytest.mark.asyncio
async def test_monitor_recovers_when_service_comes_back(
    client: HealthClient, service_state: FakeServiceState
) -> None:
    monitor = HealthMonitor(client, interval=1.0)
    rec = Recorder()

    service_state.health_code = 503
    await monitor.tick(rec.on_health, rec.on_readiness)
    service_state.health_code = 200
    await monitor.tick(rec.on_health, rec.on_readiness)

    assert [h.status for h in rec.health] == [HealthState.ERROR, HealthState.OK]
    assert rec.health[1].service == "api"
    assert len(rec.readiness) == 1
