"""Unit tests for LocalMessageBroker.

Tests cover:
- Directory register/overwrite/unregister/lookup/refresh
- publish_to_client() invokes the handler inline, drops unknown clients
- publish_broadcast() invokes the broadcast handler
- Handler replacement and handler failures (logged, not raised)
"""

from unittest.mock import AsyncMock

import pytest

from sse_cluster.domain.protocols.message_broker_protocol import (
    MessageBrokerProtocol,
)
from sse_cluster.infrastructure.sse.local_broker import LocalMessageBroker


@pytest.mark.unit
class TestDirectory:
    """Test directory operations."""

    def test_satisfies_protocol(self, local_broker):
        broker: MessageBrokerProtocol = local_broker
        assert broker is local_broker

    @pytest.mark.asyncio
    async def test_register_and_lookup(self, local_broker):
        await local_broker.register_client("c1", "instance-a")

        assert await local_broker.get_client_instance("c1") == "instance-a"

    @pytest.mark.asyncio
    async def test_register_overwrites(self, local_broker):
        await local_broker.register_client("c1", "instance-a")
        await local_broker.register_client("c1", "instance-b")

        assert await local_broker.get_client_instance("c1") == "instance-b"

    @pytest.mark.asyncio
    async def test_unregister(self, local_broker):
        await local_broker.register_client("c1", "instance-a")
        await local_broker.unregister_client("c1")

        assert await local_broker.get_client_instance("c1") is None

    @pytest.mark.asyncio
    async def test_unregister_unknown_is_noop(self, local_broker):
        await local_broker.unregister_client("nope")

    @pytest.mark.asyncio
    async def test_unregister_as_owner(self, local_broker):
        await local_broker.register_client("c1", "instance-a")

        await local_broker.unregister_client("c1", "instance-a")

        assert await local_broker.get_client_instance("c1") is None

    @pytest.mark.asyncio
    async def test_unregister_keeps_entry_of_other_owner(self, local_broker):
        await local_broker.register_client("c1", "instance-b")

        await local_broker.unregister_client("c1", "instance-a")

        assert await local_broker.get_client_instance("c1") == "instance-b"

    @pytest.mark.asyncio
    async def test_refresh_reports_known_clients(self, local_broker):
        await local_broker.register_client("c1", "instance-a")

        assert await local_broker.refresh_client("c1") is True
        assert await local_broker.refresh_client("nope") is False

    @pytest.mark.asyncio
    async def test_is_available(self, local_broker):
        assert await local_broker.is_available() is True


@pytest.mark.unit
class TestPublish:
    """Test publishing."""

    @pytest.mark.asyncio
    async def test_publish_invokes_handler(self, local_broker):
        handler = AsyncMock()
        await local_broker.subscribe("instance-a", handler)
        await local_broker.register_client("c1", "instance-a")

        await local_broker.publish_to_client("c1", "hello")

        handler.assert_awaited_once_with("c1", "hello")

    @pytest.mark.asyncio
    async def test_publish_to_unknown_client_is_dropped(self, local_broker):
        handler = AsyncMock()
        await local_broker.subscribe("instance-a", handler)

        await local_broker.publish_to_client("nope", "hello")

        handler.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_without_handler_is_noop(self, local_broker):
        await local_broker.register_client("c1", "instance-a")

        await local_broker.publish_to_client("c1", "hello")

    @pytest.mark.asyncio
    async def test_later_subscribe_replaces_handler(self, local_broker):
        first = AsyncMock()
        second = AsyncMock()
        await local_broker.subscribe("instance-a", first)
        await local_broker.subscribe("instance-a", second)
        await local_broker.register_client("c1", "instance-a")

        await local_broker.publish_to_client("c1", "hello")

        first.assert_not_awaited()
        second.assert_awaited_once_with("c1", "hello")

    @pytest.mark.asyncio
    async def test_broadcast_invokes_broadcast_handler(self, local_broker):
        handler = AsyncMock()
        await local_broker.subscribe_broadcast(handler)

        await local_broker.publish_broadcast("ping")

        handler.assert_awaited_once_with("ping")

    @pytest.mark.asyncio
    async def test_handler_failure_is_logged(self, local_broker, mock_logger):
        handler = AsyncMock(side_effect=RuntimeError("boom"))
        await local_broker.subscribe("instance-a", handler)
        await local_broker.register_client("c1", "instance-a")

        await local_broker.publish_to_client("c1", "hello")

        mock_logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_drops_handlers(self, local_broker):
        handler = AsyncMock()
        await local_broker.subscribe_broadcast(handler)

        await local_broker.close()
        await local_broker.publish_broadcast("ping")

        handler.assert_not_awaited()


@pytest.mark.unit
def test_default_logger_comes_from_container():
    """Test the container logger is used when none is injected."""
    from sse_cluster.core.container import get_logger

    broker = LocalMessageBroker()

    assert broker._logger is get_logger()
