"""Application settings loaded from the environment (prefix B2C_)."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Runtime configuration for the payments service."""

    # Application
    app_name: str = Field(default="b2c-payments", description="Application name")
    app_env: str = Field(default="development", description="Deployment environment")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    # Notifications
    notification_workers: int = Field(
        default=5, ge=1, description="Worker threads for recipient notifications"
    )
    notification_max_pending: int = Field(
        default=1000, ge=1, description="Outstanding notifications before new ones are dropped"
    )

    # Mock integrations
    mock_provider_latency_seconds: float = Field(
        default=1.0, ge=0, description="Simulated latency of the MOCK provider"
    )
    mock_provider_failure_message: str | None = Field(
        default=None, description="When set, the MOCK provider fails every call with this message"
    )
    mock_sms_latency_seconds: float = Field(
        default=0.3, ge=0, description="Simulated latency of the logging SMS gateway"
    )

    model_config = SettingsConfigDict(
        env_prefix="B2C_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level. Must be one of: {list(_VALID_LOG_LEVELS)}")
        return v.upper()

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
