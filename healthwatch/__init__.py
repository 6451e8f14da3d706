from __future__ import annotations

from healthwatch.core.exceptions import (
    DecodeError,
    GateError,
    HealthwatchError,
    HttpError,
    NetworkError,
    ProbeError,
    ProbeTimeoutError,
    ProtocolViolationError,
    ReadyTimeoutError,
)
from healthwatch.integrations.health.client import HealthClient
from healthwatch.services.dependencies import dependency_views, group_dependencies
from healthwatch.services.monitor import HealthMonitor
from healthwatch.services.presenter import describe, present, should_hide
from healthwatch.services.waiter import wait_for_live, wait_for_ready

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "GateError",
    "HealthClient",
    "HealthMonitor",
    "HealthwatchError",
    "HttpError",
    "NetworkError",
    "ProbeError",
    "ProbeTimeoutError",
    "ProtocolViolationError",
    "ReadyTimeoutError",
    "dependency_views",
    "describe",
    "group_dependencies",
    "present",
    "should_hide",
    "wait_for_live",
    "wait_for_ready",
]
