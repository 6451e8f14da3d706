from __future__ import annotations

import asyncio
import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from healthwatch.core.config import Settings
from healthwatch.core.exceptions import (
    DecodeError,
    HttpError,
    NetworkError,
    ProbeError,
    ProbeTimeoutError,
    ProtocolViolationError,
)
from healthwatch.schemas import HealthState, HealthStatus, ReadinessState, ReadinessStatus

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"

M = TypeVar("M", bound=BaseModel)

# Paths the monitored service also answers on (Kubernetes style probes)
HEALTH_ALIASES = ("/healthz", "/health", "/health/live")
READY_ALIASES = ("/readyz", "/ready", "/health/ready")

# The only status codes a readiness endpoint may use, and what each must carry
READINESS_CODES = {
    200: ReadinessState.READY,
    503: ReadinessState.NOT_READY,
}


class HealthClient:
    """HTTP probe for a service's liveness and readiness endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
        *,
        health_path: str = "/healthz",
        ready_path: str = "/readyz",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the probe client.

        Args:
            base_url: Root URL of the monitored service.
            timeout: Default deadline in seconds for a single probe.
            health_path: Liveness endpoint, one of HEALTH_ALIASES usually.
            ready_path: Readiness endpoint, one of READY_ALIASES usually.
            transport: Optional httpx transport (tests, ASGI apps).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.health_path = health_path
        self.ready_path = ready_path

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> HealthClient:
        return cls(
            base_url=settings.base_url,
            timeout=settings.probe_timeout,
            health_path=settings.health_path,
            ready_path=settings.ready_path,
            transport=transport,
        )

    async def _get(self, path: str, timeout: float | None) -> httpx.Response:
        """GET ``path`` under a hard deadline, translating transport failures.

        The deadline covers connect, send and body read; on expiry the
        in-flight request is cancelled.
        """
        deadline = self.timeout if timeout is None else timeout

        try:
            async with asyncio.timeout(deadline):
                return await self.client.get(path, timeout=httpx.Timeout(deadline))

        except (TimeoutError, httpx.TimeoutException) as e:
            raise ProbeTimeoutError(deadline) from e

        except httpx.DecodingError as e:
            raise DecodeError(f"GET {path} returned an undecodable body: {e}") from e

        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise NetworkError(f"GET {path} failed: {e}") from e

    @staticmethod
    def _decode(model: type[M], response: httpx.Response) -> M:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(
                f"Invalid {model.__name__} body from {response.request.url}: {e}"
            ) from e

    async def check_health(self, timeout: float | None = None) -> HealthStatus:
        """Check if the service process is alive.

        Any 2xx is decoded; anything else raises HttpError without reading
        the body.
        """
        response = await self._get(self.health_path, timeout)

        if not response.is_success:
            raise HttpError(response.status_code)

        return self._decode(HealthStatus, response)

    async def check_readiness(self, timeout: float | None = None) -> ReadinessStatus:
        """Check if the service can serve traffic.

        A 503 is an expected answer: its body is decoded and returned like a
        200. The client never second-guesses the server's verdict, but a
        verdict that contradicts the status code is a protocol violation.
        """
        response = await self._get(self.ready_path, timeout)
        readiness = self._decode(ReadinessStatus, response)

        expected = READINESS_CODES.get(response.status_code)
        if expected is not None and readiness.status != expected:
            raise ProtocolViolationError(response.status_code, readiness.status.value)

        if response.status_code == 503:
            logger.info(f"{readiness.service} reports not ready")

        return readiness

    async def is_healthy(self) -> bool:
        try:
            health = await self.check_health()
        except ProbeError as e:
            logger.debug(f"Health probe failed: {e}")
            return False
        return health.status == HealthState.OK

    async def is_ready(self) -> bool:
        try:
            readiness = await self.check_readiness()
        except ProbeError as e:
            logger.debug(f"Readiness probe failed: {e}")
            return False
        return readiness.status == ReadinessState.READY

    async def __aenter__(self) -> HealthClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
