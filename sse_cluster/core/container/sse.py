"""SSE dependency factories.

Application-scoped singletons for the connection/delivery subsystem:
- get_instance_id(): This process's identity in the broker
- get_message_broker(): Local or Redis broker, chosen by settings.sse_broker
- get_connection_manager(): The ConnectionManager used by routers and lifespan
"""

import socket
import uuid
from functools import lru_cache, partial
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sse_cluster.domain.protocols.logger_protocol import LoggerProtocol
    from sse_cluster.domain.protocols.message_broker_protocol import (
        MessageBrokerProtocol,
    )
    from sse_cluster.infrastructure.sse.connection_manager import ConnectionManager
    from sse_cluster.infrastructure.sse.stream import SSEStream


def generate_instance_id(configured: str | None = None) -> str:
    """Build the identity of this instance.

    Args:
        configured: Explicit instance id (wins when set).

    Returns:
        The configured id, else "<hostname>-<8 hex chars>", else a random
        UUID when the host name cannot be resolved.
    """
    if configured:
        return configured
    try:
        hostname = socket.gethostname()
    except OSError:
        return str(uuid.uuid4())
    if not hostname:
        return str(uuid.uuid4())
    return f"{hostname}-{uuid.uuid4().hex[:8]}"


@lru_cache()
def get_instance_id() -> str:
    """Get this process's instance id (app-scoped, stable for the process)."""
    from sse_cluster.core.config import get_settings

    return generate_instance_id(get_settings().instance_id)


@lru_cache()
def get_message_broker() -> "MessageBrokerProtocol":
    """Get message broker singleton (app-scoped).

    Returns:
        RedisMessageBroker when settings.sse_broker is "redis" (shared Redis
        connection pool), LocalMessageBroker otherwise.

    Usage:
        broker = get_message_broker()
        if not await broker.is_available():
            ...
    """
    from sse_cluster.core.config import get_settings
    from sse_cluster.core.container.infrastructure import get_logger
    from sse_cluster.core.enums import BrokerBackend

    settings = get_settings()
    logger = get_logger()

    if settings.sse_broker == BrokerBackend.REDIS:
        from sse_cluster.core.container.infrastructure import get_redis_client
        from sse_cluster.infrastructure.sse.redis_broker import RedisMessageBroker

        return RedisMessageBroker(
            redis_client=get_redis_client(),
            client_ttl_seconds=settings.sse_client_ttl_seconds,
            logger=logger,
        )

    from sse_cluster.infrastructure.sse.local_broker import LocalMessageBroker

    return LocalMessageBroker(logger=logger)


@lru_cache()
def get_connection_manager() -> "ConnectionManager":
    """Get connection manager singleton (app-scoped).

    Returns:
        ConnectionManager wired to get_message_broker() and get_instance_id(),
        creating SSEStream handles tuned from settings.

    Usage:
        # Presentation Layer (FastAPI Depends)
        manager: ConnectionManager = Depends(get_connection_manager)
    """
    from sse_cluster.core.config import get_settings
    from sse_cluster.core.container.infrastructure import get_logger
    from sse_cluster.infrastructure.sse.connection_manager import ConnectionManager

    settings = get_settings()
    logger = get_logger()

    stream_factory = partial(
        _build_stream,
        max_queue_size=settings.sse_stream_queue_size,
        heartbeat_interval_seconds=settings.sse_heartbeat_interval_seconds,
        logger=logger,
    )

    return ConnectionManager(
        broker=get_message_broker(),
        instance_id=get_instance_id(),
        stream_factory=stream_factory,
        stream_timeout_seconds=settings.sse_stream_timeout_seconds,
        refresh_interval_seconds=settings.sse_client_refresh_interval_seconds,
        sender=settings.sse_default_sender,
        logger=logger,
    )


def _build_stream(
    timeout_seconds: float,
    *,
    max_queue_size: int,
    heartbeat_interval_seconds: float,
    logger: "LoggerProtocol",
) -> "SSEStream":
    from sse_cluster.infrastructure.sse.stream import SSEStream

    return SSEStream(
        timeout_seconds=timeout_seconds,
        max_queue_size=max_queue_size,
        heartbeat_interval_seconds=heartbeat_interval_seconds,
        logger=logger,
    )
