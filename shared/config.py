"""
Shared configuration management for the caching proxy.
"""

from datetime import timedelta
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="PROXY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Listen address
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Key-value store
    redis_url: str = Field(default="redis://localhost:6379")
    redis_password: Optional[str] = Field(default=None)
    redis_db: int = Field(default=0, ge=0)
    store_socket_timeout_seconds: Optional[float] = Field(default=5.0)

    # Cache policy
    cache_ttl: timedelta = Field(default=timedelta(minutes=1))

    # Deadlines; unset means no limit
    upstream_timeout_seconds: Optional[float] = Field(default=None)
    request_timeout_seconds: Optional[float] = Field(default=None)

    @field_validator("cache_ttl", mode="before")
    @classmethod
    def _ttl_from_seconds(cls, value: Any) -> Any:
        # PROXY_CACHE_TTL=60 means sixty seconds
        if isinstance(value, str):
            try:
                return timedelta(seconds=float(value))
            except ValueError:
                return value
        return value

    @field_validator("cache_ttl")
    @classmethod
    def _ttl_must_be_positive(cls, value: timedelta) -> timedelta:
        if value.total_seconds() <= 0:
            raise ValueError("cache_ttl must be positive")
        return value

    @field_validator(
        "store_socket_timeout_seconds",
        "upstream_timeout_seconds",
        "request_timeout_seconds",
    )
    @classmethod
    def _timeouts_must_be_positive(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("timeouts must be positive when set")
        return value


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "proxy"


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service.

    Keyword overrides take precedence over environment variables and the
    ``.env`` file.
    """
    return ServiceConfig(service_name=service_name, **overrides)
