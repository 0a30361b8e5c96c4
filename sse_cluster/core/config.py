"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables. Every field has a default so a single local instance runs with no
environment at all; scaled deployments set at least SSE_BROKER=redis and
REDIS_URL.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Internal constants live in sse_cluster/core/constants.py

Usage:
    from sse_cluster.core.config import settings

    if settings.sse_broker == BrokerBackend.REDIS:
        redis_url = settings.redis_url
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sse_cluster.core.constants import (
    SSE_CLIENT_REFRESH_INTERVAL_SECONDS,
    SSE_CLIENT_TTL_SECONDS,
    SSE_DEFAULT_SENDER,
    SSE_HEARTBEAT_INTERVAL_SECONDS,
    SSE_STREAM_QUEUE_SIZE,
    SSE_STREAM_TIMEOUT_SECONDS,
)
from sse_cluster.core.enums import BrokerBackend, Environment

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, detailed errors)",
    )
    host: str = Field(
        default="0.0.0.0",
        description="Server bind host",
    )
    port: int = Field(
        default=8000,
        description="Server bind port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    instance_id: str | None = Field(
        default=None,
        description="Instance identifier used as this process's broker channel key. "
        "Defaults to '<hostname>-<random suffix>' when not set.",
    )

    # Application metadata
    app_name: str = Field(
        default="SSE Cluster",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # Broker configuration
    sse_broker: BrokerBackend = Field(
        default=BrokerBackend.LOCAL,
        description="Message broker backend (local for one instance, redis for many)",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (e.g., redis://host:port/db)",
    )

    # Stream and directory tuning
    sse_stream_timeout_seconds: int = Field(
        default=SSE_STREAM_TIMEOUT_SECONDS,
        gt=0,
        description="Lifetime of one stream before its timeout hook fires",
    )
    sse_stream_queue_size: int = Field(
        default=SSE_STREAM_QUEUE_SIZE,
        gt=0,
        description="Undelivered events buffered per stream before writes fail",
    )
    sse_heartbeat_interval_seconds: int = Field(
        default=SSE_HEARTBEAT_INTERVAL_SECONDS,
        gt=0,
        description="Idle interval after which a keep-alive comment is written",
    )
    sse_client_ttl_seconds: int = Field(
        default=SSE_CLIENT_TTL_SECONDS,
        gt=0,
        description="TTL of a client -> instance directory entry",
    )
    sse_client_refresh_interval_seconds: int = Field(
        default=SSE_CLIENT_REFRESH_INTERVAL_SECONDS,
        gt=0,
        description="Interval between directory refreshes of local clients",
    )
    sse_default_sender: str = Field(
        default=SSE_DEFAULT_SENDER,
        description="Sender label attached to pushed messages",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name (any case).

        Returns:
            str: Upper-case log level.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def validate_refresh_interval(self) -> "Settings":
        """
        Ensure directory entries are refreshed before they expire.

        Returns:
            Settings: Validated settings.

        Raises:
            ValueError: If the refresh interval is not shorter than the TTL.
        """
        if self.sse_client_refresh_interval_seconds >= self.sse_client_ttl_seconds:
            raise ValueError(
                "sse_client_refresh_interval_seconds must be less than "
                "sse_client_ttl_seconds"
            )
        return self

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()
