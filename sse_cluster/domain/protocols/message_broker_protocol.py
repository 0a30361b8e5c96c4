"""Message Broker Protocol for cross-instance client location and routing.

A broker answers two questions for the ConnectionManager: "which instance
owns this client?" and "how does a message reach that instance?". Two
adapters implement it:

    - LocalMessageBroker: in-process map + direct handler dispatch
      (exactly one instance)
    - RedisMessageBroker: Redis key/value directory + pub/sub channels
      (any number of instances)

The manager is written once against this protocol and cannot tell which
adapter is wired in.

Architecture:
    - Protocol-based (structural typing, no inheritance)
    - Async operations for non-blocking I/O
    - Fail-open: "client not found" is None/False, never an exception;
      backend errors during publish/lookup are logged and swallowed
    - is_available() faithfully reports backend outages
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

MessageHandler = Callable[[str, str], Awaitable[None]]
"""Handler for messages addressed to one client: ``(client_id, message)``."""

BroadcastHandler = Callable[[str], Awaitable[None]]
"""Handler for global broadcast messages: ``(message)``."""


class MessageBrokerProtocol(Protocol):
    """Protocol for locating clients and routing messages between instances.

    Example:
        >>> broker: MessageBrokerProtocol = get_message_broker()
        >>> await broker.subscribe(instance_id, deliver_to_local_client)
        >>> await broker.register_client("tab-42", instance_id)
        >>> await broker.publish_to_client("tab-42", "hello")
    """

    async def register_client(self, client_id: str, instance_id: str) -> None:
        """Record (or overwrite) the directory entry ``client_id -> instance_id``.

        Idempotent: registering an already-registered client overwrites it.

        Args:
            client_id: Logical client identifier.
            instance_id: Instance that now owns the client's stream.
        """
        ...

    async def unregister_client(
        self, client_id: str, instance_id: str | None = None
    ) -> None:
        """Remove the directory entry if present (no-op if absent).

        Args:
            client_id: Logical client identifier.
            instance_id: If given, remove the entry only while it still
                names this instance (a newer owner's entry is kept).
        """
        ...

    async def get_client_instance(self, client_id: str) -> str | None:
        """Look up the instance owning a client.

        Args:
            client_id: Logical client identifier.

        Returns:
            Instance id, or None if the client is not known to be connected.
        """
        ...

    async def refresh_client(self, client_id: str) -> bool:
        """Extend the lifetime of a client's directory entry.

        Args:
            client_id: Logical client identifier.

        Returns:
            True if the entry exists and was refreshed, False otherwise.
        """
        ...

    async def publish_to_client(self, client_id: str, message: str) -> None:
        """Route a message to whichever instance owns the client.

        Unknown clients are a silent no-op: the message is dropped, not
        queued and not retried.

        Args:
            client_id: Target client.
            message: Message payload.
        """
        ...

    async def publish_broadcast(self, message: str) -> None:
        """Deliver a message to every subscribed instance, including this one.

        Args:
            message: Message payload.
        """
        ...

    async def subscribe(self, instance_id: str, handler: MessageHandler) -> None:
        """Register the handler for messages arriving on an instance channel.

        Exactly one handler is active; a later call replaces the former.

        Args:
            instance_id: This process's instance id.
            handler: Coroutine invoked with ``(client_id, message)``.
        """
        ...

    async def subscribe_broadcast(self, handler: BroadcastHandler) -> None:
        """Register the handler for global broadcast messages.

        Exactly one handler is active; a later call replaces the former.

        Args:
            handler: Coroutine invoked with ``(message)``.
        """
        ...

    async def is_available(self) -> bool:
        """Liveness probe.

        Returns:
            True if the broker's backend is reachable, False otherwise
            (never raises).
        """
        ...

    async def close(self) -> None:
        """Release subscriptions and background listeners."""
        ...
