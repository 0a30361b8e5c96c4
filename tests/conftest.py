"""Shared pytest fixtures.

Provides:
1. RecordingStream: in-memory stream handle with manually fired hooks
2. Stream factory and mock logger fixtures
3. Manager fixtures over the local broker
4. fakeredis clients sharing one FakeServer (one Redis, many instances)
"""

from collections.abc import Awaitable, Callable
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis

from sse_cluster.domain.events.sse_message import StreamEvent
from sse_cluster.infrastructure.sse.connection_manager import ConnectionManager
from sse_cluster.infrastructure.sse.local_broker import LocalMessageBroker
from sse_cluster.infrastructure.sse.stream import StreamClosedError, StreamWriteError


# =============================================================================
# Stream fakes
# =============================================================================


class RecordingStream:
    """Stream handle that records events and lets tests fire hooks."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        self.events: list[StreamEvent] = []
        self.fail_writes = False
        self.complete_calls = 0
        self._closed = False
        self._completion_callbacks: list[Callable[[], Awaitable[None]]] = []
        self._timeout_callbacks: list[Callable[[], Awaitable[None]]] = []
        self._error_callbacks: list[Callable[[BaseException], Awaitable[None]]] = []

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def contents(self) -> list[str]:
        """Content of every received message, in order."""
        return [event.data["content"] for event in self.events]

    def send(self, event: StreamEvent) -> None:
        if self._closed:
            raise StreamClosedError("Stream is closed")
        if self.fail_writes:
            raise StreamWriteError("Broken pipe")
        self.events.append(event)

    def on_complete(self, callback: Callable[[], Awaitable[None]]) -> None:
        self._completion_callbacks.append(callback)

    def on_timeout(self, callback: Callable[[], Awaitable[None]]) -> None:
        self._timeout_callbacks.append(callback)

    def on_error(self, callback: Callable[[BaseException], Awaitable[None]]) -> None:
        self._error_callbacks.append(callback)

    def complete(self) -> None:
        self.complete_calls += 1
        self._closed = True

    async def trigger_complete(self) -> None:
        for callback in self._completion_callbacks:
            await callback()

    async def trigger_timeout(self) -> None:
        for callback in self._timeout_callbacks:
            await callback()

    async def trigger_error(self, error: BaseException | None = None) -> None:
        error = error or StreamClosedError("Client disconnected")
        for callback in self._error_callbacks:
            await callback(error)


class RecordingStreamFactory:
    """StreamFactory that keeps every stream it created."""

    def __init__(self) -> None:
        self.streams: list[RecordingStream] = []

    def __call__(self, timeout_seconds: float) -> RecordingStream:
        stream = RecordingStream(timeout_seconds)
        self.streams.append(stream)
        return stream


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_logger():
    """LoggerProtocol stand-in that records calls."""
    return MagicMock()


@pytest.fixture
def stream_factory():
    """Factory producing RecordingStream handles."""
    return RecordingStreamFactory()


@pytest.fixture
def local_broker(mock_logger):
    """Fresh in-memory broker."""
    return LocalMessageBroker(logger=mock_logger)


@pytest.fixture
def manager(local_broker, stream_factory, mock_logger):
    """Connection manager over the local broker (background refresh off)."""
    return ConnectionManager(
        local_broker,
        "instance-a",
        stream_factory=stream_factory,
        refresh_interval_seconds=None,
        logger=mock_logger,
    )


@pytest.fixture
def fake_redis_server():
    """One fake Redis shared by every client created in a test."""
    return FakeServer()


@pytest_asyncio.fixture
async def redis_client_factory(fake_redis_server):
    """Create FakeRedis clients connected to the shared fake server.

    Each call simulates the connection of one more instance.
    """
    clients: list[FakeRedis] = []

    def create() -> FakeRedis:
        client = FakeRedis(server=fake_redis_server)
        clients.append(client)
        return client

    yield create

    for client in clients:
        await client.aclose()
