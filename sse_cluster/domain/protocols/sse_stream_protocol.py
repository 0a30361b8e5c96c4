"""SSE Stream Protocol: the stream transport capability.

A stream handle is the long-lived, one-way push channel to a single client.
The ConnectionManager only ever writes to it, closes it and attaches
termination hooks; turning it into bytes on an HTTP connection is the
transport's job (see SSEStream for the in-process implementation served
through FastAPI's StreamingResponse).

Termination hooks:
    - on_complete: stream finished normally (closed and drained)
    - on_timeout: stream lifetime elapsed
    - on_error: transport failure (peer went away, unexpected exception)
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from sse_cluster.domain.events.sse_message import StreamEvent


class SSEStreamProtocol(Protocol):
    """Protocol for stream handles produced by the stream transport."""

    @property
    def is_closed(self) -> bool:
        """Whether complete() has been called or the stream terminated."""
        ...

    def send(self, event: StreamEvent) -> None:
        """Write one event to the stream.

        Args:
            event: Event to write.

        Raises:
            StreamWriteError: (an OSError) if the peer is gone or the stream
                cannot accept the event.
        """
        ...

    def on_complete(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register a hook run when the stream completes normally."""
        ...

    def on_timeout(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register a hook run when the stream times out."""
        ...

    def on_error(
        self, callback: Callable[[BaseException], Awaitable[None]]
    ) -> None:
        """Register a hook run with the error that terminated the stream."""
        ...

    def complete(self) -> None:
        """Close the stream. Idempotent."""
        ...


StreamFactory = Callable[[float], SSEStreamProtocol]
"""Creates a new stream handle given its timeout in seconds."""
