from __future__ import annotations


class HealthwatchError(Exception):
    """Base class for all healthwatch errors."""


class ProbeError(HealthwatchError):
    """A single liveness or readiness probe failed."""


class NetworkError(ProbeError):
    """No response was obtained from the service."""


class ProbeTimeoutError(ProbeError, TimeoutError):
    """The probe deadline expired before a response arrived."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Probe timed out after {timeout:g}s")
        self.timeout = timeout


class HttpError(ProbeError):
    """The health endpoint answered with a non-2xx status code."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Health check failed: {status_code}")
        self.status_code = status_code


class DecodeError(ProbeError):
    """The response body is not valid JSON or misses required fields."""


class ProtocolViolationError(DecodeError):
    """Readiness body disagrees with the HTTP status code that carried it."""

    def __init__(self, status_code: int, status: str) -> None:
        super().__init__(f"Readiness status {status!r} cannot be carried by HTTP {status_code}")
        self.status_code = status_code
        self.status = status


class ReadyTimeoutError(HealthwatchError, TimeoutError):
    """The service did not reach the awaited state within the time budget."""

    def __init__(self, max_wait: float, attempts: int, state: str = "ready") -> None:
        super().__init__(
            f"Service did not become {state} within {max_wait:g}s ({attempts} attempts)"
        )
        self.state = state
        self.max_wait = max_wait
        self.attempts = attempts


class GateError(HealthwatchError):
    """Pre-run verification of the service endpoints failed."""
