"""Connection manager - one addressing and delivery model over registry + broker.

The manager owns this instance's ConnectionRegistry and talks to a
MessageBrokerProtocol implementation for everything that crosses instances.
Callers address clients by client_id only; whether the stream lives here or
on another instance is resolved internally.

Architecture:
    - App-scoped singleton (created by the container, one per process)
    - Broker-agnostic: LocalMessageBroker and RedisMessageBroker behave the
      same from the caller's point of view
    - Fail-open delivery: write failures close the client and return False,
      nothing is raised past the manager
    - Contract violations (malformed client id) raise ValueError

Lifecycle:
    1. start() subscribes the instance channel, then the broadcast channel
    2. create_stream() retires any old local stream, installs the new one,
       registers the client with the broker and attaches termination hooks
    3. complete / timeout / error / close() converge on one idempotent
       cleanup keyed by connection_id
    4. A background task refreshes directory entries of local clients
    5. shutdown() stops the refresh task and closes every local client
"""

import asyncio
from functools import partial

from sse_cluster.core.constants import (
    SSE_CLIENT_REFRESH_INTERVAL_SECONDS,
    SSE_DEFAULT_SENDER,
    SSE_STREAM_TIMEOUT_SECONDS,
)
from sse_cluster.core.result import Failure
from sse_cluster.core.validation import validate_client_id, validate_message
from sse_cluster.domain.events.sse_message import SSEMessage, StreamEvent
from sse_cluster.domain.protocols.logger_protocol import LoggerProtocol
from sse_cluster.domain.protocols.message_broker_protocol import (
    MessageBrokerProtocol,
)
from sse_cluster.domain.protocols.sse_stream_protocol import (
    SSEStreamProtocol,
    StreamFactory,
)
from sse_cluster.infrastructure.sse.connection_registry import ConnectionRegistry
from sse_cluster.infrastructure.sse.stream import SSEStream


class ConnectionManager:
    """Orchestrates local streams and cross-instance routing.

    Attributes:
        _broker: Cross-instance directory and transport.
        _instance_id: This process's identity in the broker.
        _registry: Local client -> stream registry.
        _refresh_interval: Seconds between directory refreshes (None: off).
        _sender: Sender label stamped on delivered messages.

    Example:
        >>> manager = ConnectionManager(LocalMessageBroker(), "instance-a")
        >>> await manager.start()
        >>> stream = await manager.create_stream("c1", "welcome")
        >>> await manager.send_to_client("c1", "hello")
        True
    """

    def __init__(
        self,
        broker: MessageBrokerProtocol,
        instance_id: str,
        *,
        registry: ConnectionRegistry | None = None,
        stream_factory: StreamFactory | None = None,
        stream_timeout_seconds: float = SSE_STREAM_TIMEOUT_SECONDS,
        refresh_interval_seconds: float | None = SSE_CLIENT_REFRESH_INTERVAL_SECONDS,
        sender: str = SSE_DEFAULT_SENDER,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            broker: Broker implementation (local or distributed).
            instance_id: Identity of this instance.
            registry: Optional pre-built registry (built from stream_factory
                if not provided).
            stream_factory: Creates stream handles (SSEStream by default).
            stream_timeout_seconds: Lifetime of each stream.
            refresh_interval_seconds: Directory refresh period; None disables
                the background refresh.
            sender: Sender label for delivered messages.
            logger: Optional logger (container logger if not provided).
        """
        if logger is None:
            from sse_cluster.core.container import get_logger

            logger = get_logger()

        if registry is None:
            if stream_factory is None:
                stream_factory = partial(_new_sse_stream, logger=logger)
            registry = ConnectionRegistry(
                stream_factory,
                stream_timeout_seconds=stream_timeout_seconds,
                logger=logger,
            )

        self._broker = broker
        self._instance_id = instance_id
        self._registry = registry
        self._refresh_interval = refresh_interval_seconds
        self._sender = sender
        self._logger = logger

        self._started = False
        self._start_lock = asyncio.Lock()
        self._refresh_task: asyncio.Task[None] | None = None

    @property
    def instance_id(self) -> str:
        """Identity of this instance."""
        return self._instance_id

    @property
    def broker(self) -> MessageBrokerProtocol:
        """Broker used for cross-instance routing."""
        return self._broker

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Wire broker subscriptions and start the refresh task. Idempotent.

        Raises:
            Exception: Whatever the broker raises when a subscription cannot
                be established.
        """
        async with self._start_lock:
            if self._started:
                return

            await self._broker.subscribe(self._instance_id, self._handle_client_message)
            await self._broker.subscribe_broadcast(self._handle_broadcast)
            self._started = True

            if self._refresh_interval is not None:
                self._refresh_task = asyncio.create_task(
                    self._refresh_loop(self._refresh_interval),
                    name="sse-directory-refresh",
                )

            self._logger.info(
                "SSE connection manager started",
                instance_id=self._instance_id,
                refresh_interval_seconds=self._refresh_interval,
            )

    async def shutdown(self) -> None:
        """Stop the refresh task and close every local client."""
        if self._refresh_task is not None:
            self._refresh_task.cancel()
            try:
                await self._refresh_task
            except asyncio.CancelledError:
                pass
            self._refresh_task = None

        client_ids = self._registry.all_client_ids()
        for client_id in client_ids:
            await self.close(client_id)

        self._started = False
        self._logger.info(
            "SSE connection manager stopped",
            instance_id=self._instance_id,
            closed_clients=len(client_ids),
        )

    # =========================================================================
    # Streams
    # =========================================================================

    async def create_stream(
        self, client_id: str, initial_message: str
    ) -> SSEStreamProtocol:
        """Open (or replace) the client's stream on this instance.

        Args:
            client_id: Stable client identifier.
            initial_message: Delivered to the new stream right away.

        Returns:
            The new stream handle, for the transport layer to serve.

        Raises:
            ValueError: If client_id or initial_message is malformed.
        """
        client_id = _require_client_id(client_id)
        initial_message = _require_message(initial_message)

        if not self._started:
            await self.start()

        entry = self._registry.create(client_id)
        connection_id = entry.connection_id
        await self._broker.register_client(client_id, self._instance_id)

        async def on_complete() -> None:
            await self._cleanup(client_id, connection_id, "complete")

        async def on_timeout() -> None:
            await self._cleanup(client_id, connection_id, "timeout")

        async def on_error(error: BaseException) -> None:
            self._logger.debug(
                "SSE stream error",
                client_id=client_id,
                connection_id=connection_id,
                error_type=type(error).__name__,
                error_message=str(error),
            )
            await self._cleanup(client_id, connection_id, "error")

        entry.stream.on_complete(on_complete)
        entry.stream.on_timeout(on_timeout)
        entry.stream.on_error(on_error)

        self._logger.info(
            "SSE client connected",
            client_id=client_id,
            connection_id=connection_id,
            instance_id=self._instance_id,
        )

        await self._deliver(client_id, self._event_for(initial_message))
        return entry.stream

    async def close(self, client_id: str) -> None:
        """Tear down the client's local stream (no-op if not local).

        Raises:
            ValueError: If client_id is malformed.
        """
        client_id = _require_client_id(client_id)
        connection_id = self._registry.get(client_id)
        if connection_id is None:
            return
        await self._cleanup(client_id, connection_id, "closed")

    async def _cleanup(self, client_id: str, connection_id: str, reason: str) -> None:
        """Shared teardown for every termination path. Idempotent.

        Only a cleanup that removed the client's current mapping unregisters
        the client, so a superseded connection never touches its successor.
        The unregister is conditional on this instance still owning the
        entry; a reconnect elsewhere keeps its registration.
        """
        if not self._registry.remove_by_connection(connection_id):
            return

        await self._broker.unregister_client(client_id, self._instance_id)
        self._logger.info(
            "SSE client disconnected",
            client_id=client_id,
            connection_id=connection_id,
            reason=reason,
        )

    # =========================================================================
    # Delivery
    # =========================================================================

    async def send_to_client(self, client_id: str, message: str) -> bool:
        """Deliver a message to a client, wherever it is connected.

        Args:
            client_id: Target client.
            message: Message payload.

        Returns:
            True if delivered locally or routed to the owning instance.
            False if the client is unknown or the local write failed.

        Raises:
            ValueError: If client_id or message is malformed.
        """
        client_id = _require_client_id(client_id)
        message = _require_message(message)

        if self._registry.contains(client_id):
            return await self._deliver(client_id, self._event_for(message))

        target_instance = await self._broker.get_client_instance(client_id)
        if target_instance is None:
            self._logger.debug("SSE client not connected", client_id=client_id)
            return False

        if target_instance == self._instance_id:
            # Directory still points here but the stream is gone
            self._logger.debug(
                "Stale SSE directory entry, message dropped", client_id=client_id
            )
            return False

        await self._broker.publish_to_client(client_id, message)
        return True

    async def broadcast(self, message: str) -> None:
        """Deliver a message to every client on every instance.

        Raises:
            ValueError: If message is malformed.
        """
        await self._broker.publish_broadcast(_require_message(message))

    async def broadcast_local(self, message: str) -> None:
        """Deliver a message to this instance's clients only.

        Clients whose write fails are closed.

        Raises:
            ValueError: If message is malformed.
        """
        event = self._event_for(_require_message(message))
        for client_id in self._registry.all_client_ids():
            await self._deliver(client_id, event)

    async def _deliver(self, client_id: str, event: StreamEvent) -> bool:
        """Write one event to the client's local stream.

        Returns:
            True on success. False if the client is not local or the write
            failed (the client is cleaned up in that case).
        """
        entry = self._registry.get_entry(client_id)
        if entry is None:
            return False

        try:
            entry.stream.send(event)
            return True
        except OSError as e:
            self._logger.warning(
                "SSE write failed, closing client",
                client_id=client_id,
                connection_id=entry.connection_id,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            await self._cleanup(client_id, entry.connection_id, "write_failed")
            return False

    def _event_for(self, message: str) -> StreamEvent:
        return StreamEvent.from_message(SSEMessage(content=message, sender=self._sender))

    # =========================================================================
    # Broker handlers
    # =========================================================================

    async def _handle_client_message(self, client_id: str, message: str) -> None:
        if not await self._deliver(client_id, self._event_for(message)):
            self._logger.debug(
                "Routed SSE message has no local stream, dropped",
                client_id=client_id,
            )

    async def _handle_broadcast(self, message: str) -> None:
        await self.broadcast_local(message)

    # =========================================================================
    # Directory refresh
    # =========================================================================

    async def refresh_local_clients(self) -> int:
        """Refresh directory entries of all local clients.

        Entries that disappeared (expired or evicted) are re-registered.

        Returns:
            Number of clients that had to be re-registered.
        """
        reregistered = 0
        for client_id in self._registry.all_client_ids():
            if await self._broker.refresh_client(client_id):
                continue
            # Skip clients that disconnected during the await
            if self._registry.contains(client_id):
                await self._broker.register_client(client_id, self._instance_id)
                reregistered += 1

        if reregistered:
            self._logger.info(
                "Re-registered SSE clients with missing directory entries",
                count=reregistered,
                instance_id=self._instance_id,
            )
        return reregistered

    async def _refresh_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.refresh_local_clients()
            except Exception as e:
                self._logger.error(
                    "SSE directory refresh failed",
                    error=e,
                    instance_id=self._instance_id,
                )

    # =========================================================================
    # Queries
    # =========================================================================

    def is_local(self, client_id: str) -> bool:
        """Check whether the client's stream lives on this instance."""
        return self._registry.contains(client_id)

    async def is_connected(self, client_id: str) -> bool:
        """Check whether the client is connected here or on another instance.

        Raises:
            ValueError: If client_id is malformed.
        """
        client_id = _require_client_id(client_id)
        if self._registry.contains(client_id):
            return True
        return await self._broker.get_client_instance(client_id) is not None

    def local_count(self) -> int:
        """Number of clients connected to this instance."""
        return self._registry.count()

    def local_client_ids(self) -> set[str]:
        """Snapshot of client ids connected to this instance."""
        return self._registry.all_client_ids()


def _new_sse_stream(timeout_seconds: float, *, logger: LoggerProtocol) -> SSEStream:
    return SSEStream(timeout_seconds=timeout_seconds, logger=logger)


def _require_client_id(client_id: str) -> str:
    result = validate_client_id(client_id)
    if isinstance(result, Failure):
        raise ValueError(result.error.message)
    return result.value


def _require_message(message: str) -> str:
    result = validate_message(message)
    if isinstance(result, Failure):
        raise ValueError(result.error.message)
    return result.value
