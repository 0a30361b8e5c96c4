"""Unit tests for SSE container factories.

Tests cover:
- generate_instance_id() precedence and format
- get_message_broker() backend selection and singleton behavior
- get_connection_manager() wiring from settings

Architecture:
    - Unit tests with mocked settings
    - No Redis connection is opened (pool creation is lazy)
"""

import re
from unittest.mock import MagicMock, patch

import pytest

from sse_cluster.core.container.infrastructure import get_redis_client
from sse_cluster.core.container.sse import (
    generate_instance_id,
    get_connection_manager,
    get_instance_id,
    get_message_broker,
)
from sse_cluster.core.enums import BrokerBackend
from sse_cluster.infrastructure.sse.connection_manager import ConnectionManager
from sse_cluster.infrastructure.sse.local_broker import LocalMessageBroker
from sse_cluster.infrastructure.sse.redis_broker import RedisMessageBroker


def create_settings(**overrides) -> MagicMock:
    """Settings double with every field the SSE factories read."""
    values = {
        "instance_id": "instance-test",
        "sse_broker": BrokerBackend.LOCAL,
        "redis_url": "redis://localhost:6379/0",
        "sse_client_ttl_seconds": 3600,
        "sse_client_refresh_interval_seconds": 1200,
        "sse_stream_timeout_seconds": 1800,
        "sse_stream_queue_size": 256,
        "sse_heartbeat_interval_seconds": 30,
        "sse_default_sender": "system",
    }
    values.update(overrides)
    return MagicMock(**values)


@pytest.fixture(autouse=True)
def clear_container_caches():
    """Each test builds its own singletons."""
    caches = (get_connection_manager, get_message_broker, get_instance_id, get_redis_client)
    for factory in caches:
        factory.cache_clear()
    yield
    for factory in caches:
        factory.cache_clear()


@pytest.mark.unit
class TestGenerateInstanceId:
    """Test instance identity generation."""

    def test_configured_id_wins(self):
        assert generate_instance_id("web-1") == "web-1"

    def test_hostname_with_random_suffix(self):
        with patch("sse_cluster.core.container.sse.socket.gethostname", return_value="web"):
            instance_id = generate_instance_id()

        assert re.fullmatch(r"web-[0-9a-f]{8}", instance_id)

    def test_suffix_differs_between_calls(self):
        assert generate_instance_id() != generate_instance_id()

    def test_falls_back_to_uuid_without_hostname(self):
        with patch(
            "sse_cluster.core.container.sse.socket.gethostname",
            side_effect=OSError("no host"),
        ):
            instance_id = generate_instance_id()

        assert re.fullmatch(r"[0-9a-f-]{36}", instance_id)

    def test_get_instance_id_is_stable(self):
        with patch("sse_cluster.core.config.get_settings") as mock_settings:
            mock_settings.return_value = create_settings(instance_id=None)

            assert get_instance_id() == get_instance_id()


@pytest.mark.unit
class TestGetMessageBroker:
    """Test broker selection."""

    def test_local_backend(self):
        with patch("sse_cluster.core.config.get_settings") as mock_settings:
            mock_settings.return_value = create_settings()

            broker = get_message_broker()

        assert isinstance(broker, LocalMessageBroker)

    def test_redis_backend(self):
        with patch("sse_cluster.core.config.get_settings") as mock_settings:
            mock_settings.return_value = create_settings(
                sse_broker=BrokerBackend.REDIS, sse_client_ttl_seconds=90
            )

            broker = get_message_broker()

        assert isinstance(broker, RedisMessageBroker)
        assert broker._client_ttl == 90

    def test_broker_is_singleton(self):
        with patch("sse_cluster.core.config.get_settings") as mock_settings:
            mock_settings.return_value = create_settings()

            assert get_message_broker() is get_message_broker()


@pytest.mark.unit
class TestGetConnectionManager:
    """Test manager wiring."""

    def test_wired_from_settings(self):
        with patch("sse_cluster.core.config.get_settings") as mock_settings:
            mock_settings.return_value = create_settings(
                sse_client_refresh_interval_seconds=600
            )

            manager = get_connection_manager()

        assert isinstance(manager, ConnectionManager)
        assert manager.instance_id == "instance-test"
        assert manager.broker is get_message_broker()
        assert manager._refresh_interval == 600

    def test_manager_is_singleton(self):
        with patch("sse_cluster.core.config.get_settings") as mock_settings:
            mock_settings.return_value = create_settings()

            assert get_connection_manager() is get_connection_manager()
