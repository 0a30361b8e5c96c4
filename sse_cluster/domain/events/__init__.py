"""Domain message types.

Usage:
    from sse_cluster.domain.events import MessageKind, SSEMessage, StreamEvent
"""

from sse_cluster.domain.events.sse_message import MessageKind, SSEMessage, StreamEvent

__all__ = ["MessageKind", "SSEMessage", "StreamEvent"]
