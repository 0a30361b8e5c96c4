"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console/JSON)
- Redis client (shared connection pool)
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from sse_cluster.core.config import settings

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from sse_cluster.domain.protocols.logger_protocol import LoggerProtocol


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_redis_client() -> "Redis[bytes]":  # type: ignore[type-arg]
    """Get Redis client singleton (app-scoped).

    One connection pool is shared by directory commands, PUBLISH and the
    broker's pub/sub connection.

    Returns:
        Async Redis client (bytes responses).

    Usage:
        # Infrastructure Layer (broker wiring)
        broker = RedisMessageBroker(redis_client=get_redis_client())
    """
    from redis.asyncio import ConnectionPool, Redis

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        socket_keepalive=True,
    )
    return Redis(connection_pool=pool)


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON, one event per line)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from sse_cluster.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(use_json=not settings.is_development, level=settings.log_level)
