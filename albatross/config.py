from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from albatross.core.logging import setup_logging


class RetryPolicy(BaseModel):
    """Exponential retry policy for network-level failures.

    ``max_attempts`` counts retries after the first request, so a policy
    issues at most ``max_attempts + 1`` requests. The wait before attempt
    ``n`` is ``backoff_unit * 2**n`` seconds (none before the first).
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(..., ge=0)
    backoff_unit: float = Field(default=0.5, ge=0.0, description="Seconds")


class TransportConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=5.0, gt=0.0, description="Per-request timeout in seconds")
    retry: RetryPolicy | None = None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Albatross API
    ALBATROSS_HOST: str = "http://localhost:8080"

    # HTTP
    REQUEST_TIMEOUT: float = 5.0
    MAX_RETRIES: int | None = None
    BACKOFF_FACTOR: float = 0.5

    # Logging
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    def retry_policy(self) -> RetryPolicy | None:
        if self.MAX_RETRIES is None:
            return None
        return RetryPolicy(max_attempts=self.MAX_RETRIES, backoff_unit=self.BACKOFF_FACTOR)

    def transport_config(self) -> TransportConfig:
        return TransportConfig(timeout=self.REQUEST_TIMEOUT, retry=self.retry_policy())

    def configure_logging(self) -> None:
        setup_logging(log_level=self.LOG_LEVEL, debug=self.DEBUG)
