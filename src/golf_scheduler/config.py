"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from golf_scheduler.services.transient_errors import DEFAULT_TRANSIENT_SIGNATURES

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    appsync_endpoint: str
    appsync_api_key: str
    request_timeout_seconds: float = 15
    retry_max_retries: int = 4
    retry_base_delay_ms: int = 1500
    retry_max_delay_ms: int = 15000
    retry_backoff_multiplier: float = 2
    transport_settle_delay_ms: int = 100
    transient_error_signatures: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_error_signatures(raw: str | None) -> tuple[str, ...]:
    """Parse comma-separated transient error signatures from env."""
    if raw is None:
        return DEFAULT_TRANSIENT_SIGNATURES
    signatures = [chunk.strip().lower() for chunk in raw.split(",")]
    cleaned = tuple(signature for signature in signatures if signature)
    return cleaned or DEFAULT_TRANSIENT_SIGNATURES
