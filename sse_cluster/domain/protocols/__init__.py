"""Domain protocols (ports) package.

This package contains protocol definitions that the domain layer needs.
Infrastructure adapters implement these protocols without inheritance.

Usage:
    from sse_cluster.domain.protocols import MessageBrokerProtocol, SSEStreamProtocol
"""

from sse_cluster.domain.protocols.logger_protocol import LoggerProtocol
from sse_cluster.domain.protocols.message_broker_protocol import (
    BroadcastHandler,
    MessageBrokerProtocol,
    MessageHandler,
)
from sse_cluster.domain.protocols.sse_stream_protocol import (
    SSEStreamProtocol,
    StreamFactory,
)

__all__ = [
    "BroadcastHandler",
    "LoggerProtocol",
    "MessageBrokerProtocol",
    "MessageHandler",
    "SSEStreamProtocol",
    "StreamFactory",
]
