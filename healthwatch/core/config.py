from __future__ import annotations

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HEALTHWATCH_",
        extra="ignore",
    )

    # Monitored service
    base_url: str = "http://localhost:3001"
    health_path: str = "/healthz"
    ready_path: str = "/readyz"

    # Probes (seconds)
    probe_timeout: float = 5.0

    # Continuous monitoring (seconds)
    monitor_interval: float = 30.0

    # waitForReady gate (seconds)
    wait_max: float = 60.0
    wait_poll_interval: float = 2.0

    # Logging
    log_level: str = "INFO"

    @model_validator(mode="after")
    def validate_durations(self) -> Settings:
        for name in ("probe_timeout", "monitor_interval", "wait_max", "wait_poll_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        return self


def get_settings() -> Settings:
    """Read settings from the environment and ``.env``.

    Only entry points call this; library classes take plain values.
    """
    return Settings()
