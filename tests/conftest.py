from __future__ import annotations

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
from httpx import ASGITransport

from healthwatch.integrations.health.client import HealthClient
from tests.fake_service import FakeServiceState, create_fake_service

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def service_state() -> FakeServiceState:
    return FakeServiceState()


@pytest.fixture
async def client(service_state: FakeServiceState) -> AsyncGenerator[HealthClient, None]:
    transport = ASGITransport(app=create_fake_service(service_state))
    async with HealthClient("http://test", timeout=1.0, transport=transport) as hc:
        yield hc


@pytest.fixture
async def mock_client() -> AsyncGenerator[Callable[[Handler], HealthClient], None]:
    """Factory for clients whose requests are answered by a plain handler."""
    created: list[HealthClient] = []

    def _make(handler: Handler) -> HealthClient:
        hc = HealthClient("http://test", timeout=1.0, transport=httpx.MockTransport(handler))
        created.append(hc)
        return hc

    yield _make

    for hc in created:
        await hc.close()
