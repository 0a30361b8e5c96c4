"""SSE infrastructure adapters package.

This package contains the connection/delivery subsystem:
- SSEStream: In-process stream handle served through StreamingResponse
- ConnectionRegistry: Per-instance client -> stream mapping (latest wins)
- LocalMessageBroker: In-memory broker for single-instance deployments
- RedisMessageBroker: Redis directory + pub/sub broker for many instances
- ConnectionManager: Orchestrates registry and broker (app-scoped singleton)
- SSEChannelKeys: Redis key and channel naming conventions

Architecture:
    - Implements domain protocols without inheritance (structural typing)
    - Uses Redis pub/sub for horizontal scaling
    - Fail-open design: broker outages degrade delivery, not control flow
"""

from sse_cluster.infrastructure.sse.channel_keys import SSEChannelKeys
from sse_cluster.infrastructure.sse.connection_manager import ConnectionManager
from sse_cluster.infrastructure.sse.connection_registry import (
    ConnectionEntry,
    ConnectionRegistry,
)
from sse_cluster.infrastructure.sse.local_broker import LocalMessageBroker
from sse_cluster.infrastructure.sse.redis_broker import RedisMessageBroker
from sse_cluster.infrastructure.sse.stream import (
    SSEStream,
    StreamClosedError,
    StreamTermination,
    StreamWriteError,
)

__all__ = [
    "ConnectionEntry",
    "ConnectionManager",
    "ConnectionRegistry",
    "LocalMessageBroker",
    "RedisMessageBroker",
    "SSEChannelKeys",
    "SSEStream",
    "StreamClosedError",
    "StreamTermination",
    "StreamWriteError",
]
