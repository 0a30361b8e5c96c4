"""Per-instance registry of open streams.

Two keyed maps, owned by exactly one instance:

    client_id      -> connection_id     (who the client is)
    connection_id  -> ConnectionEntry   (which physical stream is active)

A fresh connection_id is generated every time a client (re)connects, which
decouples the logical client from the physical stream and lets late
termination hooks of a superseded stream recognise they are stale.

Concurrency:
    No method awaits, so every mutation (including retire-then-install in
    create()) runs atomically on the event loop; no registry-wide lock.
"""

from dataclasses import dataclass

from uuid_extensions import uuid7

from sse_cluster.core.constants import SSE_STREAM_TIMEOUT_SECONDS
from sse_cluster.domain.protocols.logger_protocol import LoggerProtocol
from sse_cluster.domain.protocols.sse_stream_protocol import (
    SSEStreamProtocol,
    StreamFactory,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class ConnectionEntry:
    """One active stream for one client.

    Attributes:
        client_id: Caller-supplied stable client identifier.
        connection_id: Identifier of this particular stream instance.
        stream: Stream handle (owned by the registry).
    """

    client_id: str
    connection_id: str
    stream: SSEStreamProtocol


class ConnectionRegistry:
    """Latest-wins registry of local streams, one per client.

    Attributes:
        _client_to_connection: client_id -> current connection_id.
        _connections: connection_id -> ConnectionEntry.
        _stream_factory: Creates stream handles for create().
    """

    def __init__(
        self,
        stream_factory: StreamFactory,
        *,
        stream_timeout_seconds: float = SSE_STREAM_TIMEOUT_SECONDS,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            stream_factory: Called with the timeout to create each stream.
            stream_timeout_seconds: Timeout passed to the factory.
            logger: Optional logger (container logger if not provided).
        """
        if logger is None:
            from sse_cluster.core.container import get_logger

            logger = get_logger()

        self._client_to_connection: dict[str, str] = {}
        self._connections: dict[str, ConnectionEntry] = {}
        self._stream_factory = stream_factory
        self._stream_timeout_seconds = stream_timeout_seconds
        self._logger = logger

    def create(self, client_id: str) -> ConnectionEntry:
        """Install a new stream for a client, retiring any previous one first.

        The previous connection (if any) is removed from both maps and its
        stream closed before the new mapping is installed, so lookups never
        see zero or two live streams for the client.

        Args:
            client_id: Client identifier.

        Returns:
            The new ConnectionEntry.
        """
        old_connection_id = self._client_to_connection.pop(client_id, None)
        if old_connection_id is not None:
            self._discard(old_connection_id)
            self._logger.debug(
                "Retired previous SSE connection",
                client_id=client_id,
                connection_id=old_connection_id,
            )

        entry = ConnectionEntry(
            client_id=client_id,
            connection_id=str(uuid7()),
            stream=self._stream_factory(self._stream_timeout_seconds),
        )
        self._connections[entry.connection_id] = entry
        self._client_to_connection[client_id] = entry.connection_id
        return entry

    def remove(self, client_id: str) -> bool:
        """Tear down the client's current connection.

        Args:
            client_id: Client identifier.

        Returns:
            True if a connection was removed, False if none existed.
        """
        connection_id = self._client_to_connection.pop(client_id, None)
        if connection_id is None:
            return False
        self._discard(connection_id)
        return True

    def remove_by_connection(self, connection_id: str) -> bool:
        """Tear down one specific connection.

        The client mapping is only removed while it still points at this
        connection; a newer connection for the same client is left intact.

        Args:
            connection_id: Connection to remove.

        Returns:
            True if the client's CURRENT mapping was removed, False if the
            connection was unknown or already superseded.
        """
        entry = self._discard(connection_id)
        if entry is None:
            return False
        if self._client_to_connection.get(entry.client_id) != connection_id:
            return False
        del self._client_to_connection[entry.client_id]
        return True

    def get(self, client_id: str) -> str | None:
        """Get the client's current connection id (None if not local)."""
        return self._client_to_connection.get(client_id)

    def get_entry(self, client_id: str) -> ConnectionEntry | None:
        """Get the client's current connection entry (None if not local)."""
        connection_id = self._client_to_connection.get(client_id)
        if connection_id is None:
            return None
        return self._connections.get(connection_id)

    def get_stream(self, client_id: str) -> SSEStreamProtocol | None:
        """Get the client's current stream handle (None if not local)."""
        entry = self.get_entry(client_id)
        return entry.stream if entry is not None else None

    def contains(self, client_id: str) -> bool:
        """Check whether the client has a local stream."""
        return client_id in self._client_to_connection

    def count(self) -> int:
        """Number of local clients."""
        return len(self._client_to_connection)

    def all_client_ids(self) -> set[str]:
        """Snapshot of local client ids (safe to iterate while mutating)."""
        return set(self._client_to_connection)

    def _discard(self, connection_id: str) -> ConnectionEntry | None:
        """Drop a connection entry and close its stream (idempotent)."""
        entry = self._connections.pop(connection_id, None)
        if entry is None:
            return None
        try:
            entry.stream.complete()
        except Exception as e:
            self._logger.debug(
                "Error completing SSE stream",
                connection_id=connection_id,
                error_type=type(e).__name__,
                error_message=str(e),
            )
        return entry
