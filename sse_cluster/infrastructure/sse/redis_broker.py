"""Redis broker implementing MessageBrokerProtocol.

Multi-instance deployments: every instance shares one Redis.

    Directory:  SET sse:client:{client_id} {instance_id} EX {ttl}
    Routing:    PUBLISH sse:channel:{instance_id} "{client_id}::{message}"
    Broadcast:  PUBLISH sse:broadcast "{message}"

Each broker owns one pub/sub connection listening on its instance channel
and the broadcast channel; a background task reads messages and hands them
to the registered handlers.

Architecture:
    - Implements MessageBrokerProtocol without inheritance (structural typing)
    - Fire-and-forget publish: no acknowledgment, at-most-once delivery
    - Fail-open design: lookup/publish errors are logged but don't raise
    - is_available() reports outages via PING
    - Subscribe failures are raised: an instance that cannot listen must not
      start accepting clients
"""

import asyncio

from redis.asyncio import Redis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from sse_cluster.core.constants import (
    SSE_CLIENT_TTL_SECONDS,
    SSE_PUBSUB_POLL_TIMEOUT_SECONDS,
    SSE_PUBSUB_RECONNECT_DELAY_SECONDS,
)
from sse_cluster.domain.protocols.logger_protocol import LoggerProtocol
from sse_cluster.domain.protocols.message_broker_protocol import (
    BroadcastHandler,
    MessageHandler,
)
from sse_cluster.infrastructure.sse.channel_keys import SSEChannelKeys
from sse_cluster.infrastructure.sse.envelope import (
    decode_client_envelope,
    encode_client_envelope,
)


# Compare-and-delete: only the registered owner may remove the entry
_UNREGISTER_IF_OWNER_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


def _decode(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


class RedisMessageBroker:
    """Redis implementation of MessageBrokerProtocol.

    Note: Does NOT inherit from MessageBrokerProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client used for directory commands and PUBLISH.
        _pubsub: Dedicated pub/sub connection for this instance.
        _client_ttl: Directory entry TTL (seconds).
        _instance_channel: Channel subscribed by subscribe(), if any.
        _listener_task: Background task reading pub/sub messages.
    """

    def __init__(
        self,
        redis_client: "Redis[bytes]",  # type: ignore[type-arg]
        *,
        client_ttl_seconds: int = SSE_CLIENT_TTL_SECONDS,
        poll_timeout_seconds: float = SSE_PUBSUB_POLL_TIMEOUT_SECONDS,
        reconnect_delay_seconds: float = SSE_PUBSUB_RECONNECT_DELAY_SECONDS,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize Redis broker.

        Args:
            redis_client: Async Redis client instance.
            client_ttl_seconds: TTL applied on register and refresh.
            poll_timeout_seconds: Max time one pub/sub read blocks.
            reconnect_delay_seconds: Pause after a pub/sub read error.
            logger: Optional logger (container logger if not provided).
        """
        if logger is None:
            from sse_cluster.core.container import get_logger

            logger = get_logger()

        self._redis = redis_client
        self._pubsub: PubSub = redis_client.pubsub()
        self._unregister_if_owner = redis_client.register_script(
            _UNREGISTER_IF_OWNER_LUA
        )
        self._client_ttl = client_ttl_seconds
        self._poll_timeout = poll_timeout_seconds
        self._reconnect_delay = reconnect_delay_seconds
        self._logger = logger

        self._instance_channel: str | None = None
        self._broadcast_subscribed = False
        self._message_handler: MessageHandler | None = None
        self._broadcast_handler: BroadcastHandler | None = None
        self._listener_task: asyncio.Task[None] | None = None
        self._closing = False

    # =========================================================================
    # Directory
    # =========================================================================

    async def register_client(self, client_id: str, instance_id: str) -> None:
        """Write the directory entry with the configured TTL.

        Note:
            Fail-open: errors are logged, not raised.
        """
        key = SSEChannelKeys.client_key(client_id)
        try:
            await self._redis.set(key, instance_id, ex=self._client_ttl)
            self._logger.debug(
                "Registered SSE client",
                client_id=client_id,
                instance_id=instance_id,
                ttl_seconds=self._client_ttl,
            )
        except RedisError as e:
            self._logger.warning(
                "Failed to register SSE client (fail-open)",
                client_id=client_id,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def unregister_client(
        self, client_id: str, instance_id: str | None = None
    ) -> None:
        """Delete the directory entry (no-op if absent).

        With instance_id, the entry is deleted atomically (Lua script) only
        while it still names that instance.
        """
        key = SSEChannelKeys.client_key(client_id)
        try:
            if instance_id is None:
                removed = bool(await self._redis.delete(key))
            else:
                removed = bool(
                    await self._unregister_if_owner(keys=[key], args=[instance_id])
                )
            self._logger.debug(
                "Unregistered SSE client",
                client_id=client_id,
                instance_id=instance_id,
                removed=removed,
            )
        except RedisError as e:
            self._logger.warning(
                "Failed to unregister SSE client (fail-open)",
                client_id=client_id,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def get_client_instance(self, client_id: str) -> str | None:
        """Look up the owning instance.

        Returns:
            Instance id, or None if absent, expired or the lookup failed.
        """
        key = SSEChannelKeys.client_key(client_id)
        try:
            value = await self._redis.get(key)
        except RedisError as e:
            self._logger.warning(
                "Failed to look up SSE client (fail-open)",
                client_id=client_id,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return None
        return _decode(value) if value is not None else None

    async def refresh_client(self, client_id: str) -> bool:
        """Reset the directory entry's TTL.

        Returns:
            True if the entry existed and was refreshed, False otherwise.
        """
        key = SSEChannelKeys.client_key(client_id)
        try:
            return bool(await self._redis.expire(key, self._client_ttl))
        except RedisError as e:
            self._logger.warning(
                "Failed to refresh SSE client (fail-open)",
                client_id=client_id,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    # =========================================================================
    # Publishing
    # =========================================================================

    async def publish_to_client(self, client_id: str, message: str) -> None:
        """Publish a message on the owning instance's channel.

        Note:
            Unknown clients are dropped; publish errors are logged.
        """
        target_instance = await self.get_client_instance(client_id)
        if target_instance is None:
            self._logger.debug(
                "SSE client not found, message dropped", client_id=client_id
            )
            return

        try:
            payload = encode_client_envelope(client_id, message)
        except ValueError as e:
            self._logger.warning(
                "Cannot encode SSE envelope, message dropped",
                client_id=client_id,
                error_message=str(e),
            )
            return

        channel = SSEChannelKeys.instance_channel(target_instance)
        try:
            await self._redis.publish(channel, payload)
            self._logger.debug(
                "Published SSE message", client_id=client_id, channel=channel
            )
        except RedisError as e:
            self._logger.warning(
                "Failed to publish SSE message (fail-open)",
                client_id=client_id,
                channel=channel,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def publish_broadcast(self, message: str) -> None:
        """Publish a message on the broadcast channel."""
        channel = SSEChannelKeys.broadcast_channel()
        try:
            await self._redis.publish(channel, message)
            self._logger.debug("Published SSE broadcast", channel=channel)
        except RedisError as e:
            self._logger.warning(
                "Failed to publish SSE broadcast (fail-open)",
                channel=channel,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    # =========================================================================
    # Subscriptions
    # =========================================================================

    async def subscribe(self, instance_id: str, handler: MessageHandler) -> None:
        """Listen on the instance channel and route messages to the handler.

        A later call replaces the handler (and switches channel if the
        instance id changed).

        Raises:
            RedisError: If the subscription cannot be established.
        """
        self._message_handler = handler
        channel = SSEChannelKeys.instance_channel(instance_id)

        if channel != self._instance_channel:
            try:
                if self._instance_channel is not None:
                    await self._pubsub.unsubscribe(self._instance_channel)
                await self._pubsub.subscribe(channel)
            except RedisError as e:
                self._logger.error(
                    "Failed to subscribe to SSE instance channel",
                    error=e,
                    channel=channel,
                )
                raise
            self._instance_channel = channel

        self._ensure_listener()
        self._logger.info(
            "Subscribed to SSE instance channel",
            channel=channel,
            instance_id=instance_id,
        )

    async def subscribe_broadcast(self, handler: BroadcastHandler) -> None:
        """Listen on the broadcast channel (replaces any previous handler).

        Raises:
            RedisError: If the subscription cannot be established.
        """
        self._broadcast_handler = handler
        channel = SSEChannelKeys.broadcast_channel()

        if not self._broadcast_subscribed:
            try:
                await self._pubsub.subscribe(channel)
            except RedisError as e:
                self._logger.error(
                    "Failed to subscribe to SSE broadcast channel",
                    error=e,
                    channel=channel,
                )
                raise
            self._broadcast_subscribed = True

        self._ensure_listener()
        self._logger.info("Subscribed to SSE broadcast channel", channel=channel)

    def _ensure_listener(self) -> None:
        if self._listener_task is None or self._listener_task.done():
            self._closing = False
            self._listener_task = asyncio.create_task(
                self._listen(), name="sse-redis-broker-listener"
            )

    async def _listen(self) -> None:
        """Read pub/sub messages until close()."""
        while not self._closing:
            try:
                message = await self._pubsub.get_message(
                    ignore_subscribe_messages=True,
                    timeout=self._poll_timeout,
                )
            except (RedisError, OSError) as e:
                self._logger.warning(
                    "SSE pub/sub read failed, retrying",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                await asyncio.sleep(self._reconnect_delay)
                continue

            if message is None or message.get("type") != "message":
                continue

            await self._dispatch(_decode(message["channel"]), _decode(message["data"]))

    async def _dispatch(self, channel: str, payload: str) -> None:
        """Hand one pub/sub message to the matching handler."""
        if SSEChannelKeys.is_broadcast_channel(channel):
            if self._broadcast_handler is None:
                return
            try:
                await self._broadcast_handler(payload)
            except Exception as e:
                self._logger.error("SSE broadcast handler failed", error=e)
            return

        parsed = decode_client_envelope(payload)
        if parsed is None:
            self._logger.warning(
                "Malformed SSE envelope, message dropped", channel=channel
            )
            return

        client_id, message = parsed
        if self._message_handler is None:
            return
        try:
            await self._message_handler(client_id, message)
        except Exception as e:
            self._logger.error(
                "SSE message handler failed", error=e, client_id=client_id
            )

    # =========================================================================
    # Health and lifecycle
    # =========================================================================

    async def is_available(self) -> bool:
        """PING the backend.

        Returns:
            True if Redis answered, False otherwise (never raises).
        """
        try:
            await self._redis.ping()  # type: ignore[misc]
            return True
        except (RedisError, OSError) as e:
            self._logger.warning(
                "Redis is not available",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    async def close(self) -> None:
        """Stop the listener and release the pub/sub connection."""
        self._closing = True
        if self._listener_task is not None:
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass
            self._listener_task = None

        try:
            await self._pubsub.unsubscribe()
            await self._pubsub.aclose()  # type: ignore[no-untyped-call]
        except Exception as e:
            self._logger.warning(
                "Error cleaning up SSE pub/sub",
                error_type=type(e).__name__,
                error_message=str(e),
            )
        self._instance_channel = None
        self._broadcast_subscribed = False
