"""
Unit tests for configuration management (flat Settings).

Tests cover:
- Default values (the app runs without any environment)
- Settings loading from environment variables
- Validation (log level, positive durations, refresh interval < TTL)
- Cached singleton behavior
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from sse_cluster.core.config import Settings, get_settings
from sse_cluster.core.enums import BrokerBackend, Environment


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Keep the cached singleton from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestEnvironmentEnum:
    """Test Environment enum."""

    def test_environment_values(self):
        """Test that all expected environments are defined."""
        assert Environment.DEVELOPMENT == "development"
        assert Environment.TESTING == "testing"
        assert Environment.CI == "ci"
        assert Environment.PRODUCTION == "production"


class TestSettingsDefaults:
    """Test defaults with an empty environment."""

    def test_defaults(self):
        """Test a single local instance needs no configuration."""
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.sse_broker == BrokerBackend.LOCAL
        assert settings.instance_id is None
        assert settings.sse_stream_timeout_seconds == 1800
        assert settings.sse_client_ttl_seconds == 3600
        assert settings.sse_client_refresh_interval_seconds == 1200
        assert settings.sse_default_sender == "system"
        assert settings.log_level == "INFO"
        assert settings.is_development is True
        assert settings.is_production is False


class TestSettingsFromEnvironment:
    """Test loading values from environment variables."""

    def test_redis_deployment(self):
        """Test a scaled deployment's environment."""
        env_values = {
            "ENVIRONMENT": "production",
            "SSE_BROKER": "redis",
            "REDIS_URL": "redis://cache:6379/2",
            "INSTANCE_ID": "web-1",
            "SSE_CLIENT_TTL_SECONDS": "120",
            "SSE_CLIENT_REFRESH_INTERVAL_SECONDS": "30",
        }
        with patch.dict(os.environ, env_values, clear=True):
            settings = get_settings()

        assert settings.is_production is True
        assert settings.sse_broker == BrokerBackend.REDIS
        assert settings.redis_url == "redis://cache:6379/2"
        assert settings.instance_id == "web-1"
        assert settings.sse_client_ttl_seconds == 120
        assert settings.sse_client_refresh_interval_seconds == 30

    def test_log_level_is_normalized(self):
        """Test log level names are case-insensitive."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True):
            assert get_settings().log_level == "DEBUG"


class TestSettingsValidation:
    """Test Settings field validation."""

    def test_invalid_log_level(self):
        """Test unknown log levels are rejected."""
        with patch.dict(os.environ, {"LOG_LEVEL": "verbose"}, clear=True):
            with pytest.raises(ValidationError):
                Settings()

    def test_invalid_broker(self):
        """Test only known broker backends are accepted."""
        with patch.dict(os.environ, {"SSE_BROKER": "kafka"}, clear=True):
            with pytest.raises(ValidationError):
                Settings()

    @pytest.mark.parametrize(
        "name",
        ["SSE_STREAM_TIMEOUT_SECONDS", "SSE_CLIENT_TTL_SECONDS", "SSE_STREAM_QUEUE_SIZE"],
    )
    def test_durations_must_be_positive(self, name):
        """Test zero is rejected for sizes and durations."""
        with patch.dict(os.environ, {name: "0"}, clear=True):
            with pytest.raises(ValidationError):
                Settings()

    def test_refresh_interval_must_be_below_ttl(self):
        """Test entries are refreshed before they can expire."""
        env_values = {
            "SSE_CLIENT_TTL_SECONDS": "60",
            "SSE_CLIENT_REFRESH_INTERVAL_SECONDS": "60",
        }
        with patch.dict(os.environ, env_values, clear=True):
            with pytest.raises(ValidationError, match="less than"):
                Settings()


class TestSettingsCache:
    """Test cached singleton behavior."""

    def test_get_settings_is_cached(self):
        """Test repeated calls return the same instance."""
        assert get_settings() is get_settings()
