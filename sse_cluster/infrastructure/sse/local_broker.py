"""Local in-memory broker implementing MessageBrokerProtocol.

Single-instance deployments only: the directory is a process-local dict and
publishing invokes the registered handler directly (no network hop, no
serialization). For several instances use RedisMessageBroker.

Architecture:
    - Implements MessageBrokerProtocol without inheritance (structural typing)
    - Handlers are awaited inline, so a publish returns after local delivery
    - Handler failures are logged, never raised to the publisher
    - is_available() is always True
"""

from sse_cluster.domain.protocols.logger_protocol import LoggerProtocol
from sse_cluster.domain.protocols.message_broker_protocol import (
    BroadcastHandler,
    MessageHandler,
)


class LocalMessageBroker:
    """In-process implementation of MessageBrokerProtocol.

    Note: Does NOT inherit from MessageBrokerProtocol (uses structural typing).

    Attributes:
        _client_to_instance: Directory of client_id -> instance_id.
        _instance_id: Instance id of the last subscribe() call.
        _message_handler: Active handler for per-client messages.
        _broadcast_handler: Active handler for broadcasts.
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        """Initialize the local broker.

        Args:
            logger: Optional logger (container logger if not provided).
        """
        if logger is None:
            from sse_cluster.core.container import get_logger

            logger = get_logger()

        self._client_to_instance: dict[str, str] = {}
        self._instance_id: str | None = None
        self._message_handler: MessageHandler | None = None
        self._broadcast_handler: BroadcastHandler | None = None
        self._logger = logger

    async def register_client(self, client_id: str, instance_id: str) -> None:
        """Record (or overwrite) the client's owning instance."""
        self._client_to_instance[client_id] = instance_id
        self._logger.debug(
            "Registered SSE client", client_id=client_id, instance_id=instance_id
        )

    async def unregister_client(
        self, client_id: str, instance_id: str | None = None
    ) -> None:
        """Remove the client's directory entry if present.

        With instance_id, the entry is removed only while it names that
        instance.
        """
        owner = self._client_to_instance.get(client_id)
        if owner is None or (instance_id is not None and owner != instance_id):
            return
        del self._client_to_instance[client_id]
        self._logger.debug("Unregistered SSE client", client_id=client_id)

    async def get_client_instance(self, client_id: str) -> str | None:
        """Look up the client's owning instance."""
        return self._client_to_instance.get(client_id)

    async def refresh_client(self, client_id: str) -> bool:
        """Entries never expire locally; report whether the client is known."""
        return client_id in self._client_to_instance

    async def publish_to_client(self, client_id: str, message: str) -> None:
        """Deliver a message to a registered client through the handler.

        Args:
            client_id: Target client.
            message: Message payload.

        Note:
            Unknown clients and a missing handler are silent no-ops.
        """
        if client_id not in self._client_to_instance:
            self._logger.debug(
                "SSE client not registered, message dropped", client_id=client_id
            )
            return
        if self._message_handler is None:
            return

        try:
            await self._message_handler(client_id, message)
        except Exception as e:
            self._logger.error(
                "SSE message handler failed", error=e, client_id=client_id
            )

    async def publish_broadcast(self, message: str) -> None:
        """Deliver a message through the broadcast handler."""
        if self._broadcast_handler is None:
            return

        try:
            await self._broadcast_handler(message)
        except Exception as e:
            self._logger.error("SSE broadcast handler failed", error=e)

    async def subscribe(self, instance_id: str, handler: MessageHandler) -> None:
        """Set the per-client message handler (replaces any previous one)."""
        self._instance_id = instance_id
        self._message_handler = handler
        self._logger.info("Subscribed to local SSE delivery", instance_id=instance_id)

    async def subscribe_broadcast(self, handler: BroadcastHandler) -> None:
        """Set the broadcast handler (replaces any previous one)."""
        self._broadcast_handler = handler
        self._logger.info("Subscribed to local SSE broadcast")

    async def is_available(self) -> bool:
        """The in-process broker is always available."""
        return True

    async def close(self) -> None:
        """Drop handlers; the directory is discarded with the process."""
        self._message_handler = None
        self._broadcast_handler = None
