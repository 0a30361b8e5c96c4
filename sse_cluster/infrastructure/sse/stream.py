"""In-process SSE stream handle implementing SSEStreamProtocol.

SSEStream buffers events in a bounded asyncio queue and exposes them as an
async generator of text/event-stream frames, ready to hand to FastAPI's
StreamingResponse.

Lifecycle:
    - send() enqueues without blocking; a closed stream or a full buffer is
      a write failure (StreamWriteError, an OSError)
    - complete() closes the stream; already-buffered events are still
      drained to the client
    - events() ends in exactly one termination kind, fired once:
        COMPLETE  closed and drained
        TIMEOUT   lifetime elapsed
        ERROR     the consumer went away (cancelled/closed the generator)
                  or an unexpected exception escaped
    - Hook exceptions are logged, never propagated
"""

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import StrEnum

from sse_cluster.core.constants import (
    SSE_HEARTBEAT_INTERVAL_SECONDS,
    SSE_RETRY_INTERVAL_MS,
    SSE_STREAM_QUEUE_SIZE,
    SSE_STREAM_TIMEOUT_SECONDS,
)
from sse_cluster.domain.events.sse_message import StreamEvent
from sse_cluster.domain.protocols.logger_protocol import LoggerProtocol


class StreamWriteError(OSError):
    """An event could not be written to a stream."""


class StreamClosedError(StreamWriteError):
    """The stream is closed or its peer disconnected."""


class StreamTermination(StrEnum):
    """How a stream ended."""

    COMPLETE = "complete"
    TIMEOUT = "timeout"
    ERROR = "error"


class SSEStream:
    """Queue-backed SSE stream handle.

    Note: Does NOT inherit from SSEStreamProtocol (uses structural typing).

    Attributes:
        _queue: Bounded buffer of pending events (None wakes the consumer).
        _deadline: Monotonic instant at which the stream times out.
        _closed: Set by complete() or by termination.
        _terminated: Set once the termination hooks have been fired.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = SSE_STREAM_TIMEOUT_SECONDS,
        max_queue_size: int = SSE_STREAM_QUEUE_SIZE,
        heartbeat_interval_seconds: float = SSE_HEARTBEAT_INTERVAL_SECONDS,
        retry_ms: int | None = SSE_RETRY_INTERVAL_MS,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize the stream.

        Args:
            timeout_seconds: Lifetime before the timeout hooks fire.
            max_queue_size: Undelivered events buffered before send() fails.
            heartbeat_interval_seconds: Idle time before a keep-alive comment.
            retry_ms: Reconnection hint sent first (None to omit).
            logger: Optional logger (container logger if not provided).
        """
        if logger is None:
            from sse_cluster.core.container import get_logger

            logger = get_logger()

        self._timeout_seconds = timeout_seconds
        self._deadline = time.monotonic() + timeout_seconds
        self._queue: asyncio.Queue[StreamEvent | None] = asyncio.Queue(
            maxsize=max_queue_size
        )
        self._heartbeat_interval = heartbeat_interval_seconds
        self._retry_ms = retry_ms
        self._logger = logger

        self._closed = False
        self._serving = False
        self._terminated = False
        self._termination_task: asyncio.Task[None] | None = None

        self._completion_callbacks: list[Callable[[], Awaitable[None]]] = []
        self._timeout_callbacks: list[Callable[[], Awaitable[None]]] = []
        self._error_callbacks: list[Callable[[BaseException], Awaitable[None]]] = []

    @property
    def is_closed(self) -> bool:
        """Whether the stream accepts no more events."""
        return self._closed

    @property
    def timeout_seconds(self) -> float:
        """Configured stream lifetime."""
        return self._timeout_seconds

    @property
    def pending(self) -> int:
        """Number of buffered, not yet served events."""
        return self._queue.qsize()

    def send(self, event: StreamEvent) -> None:
        """Enqueue one event for the client.

        Args:
            event: Event to write.

        Raises:
            StreamClosedError: If the stream is closed.
            StreamWriteError: If the buffer is full (consumer too slow or gone).
        """
        if self._closed:
            raise StreamClosedError("Stream is closed")
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull as e:
            raise StreamWriteError("Stream buffer is full") from e

    def on_complete(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register a hook run when the stream completes normally."""
        self._completion_callbacks.append(callback)

    def on_timeout(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register a hook run when the stream times out."""
        self._timeout_callbacks.append(callback)

    def on_error(
        self, callback: Callable[[BaseException], Awaitable[None]]
    ) -> None:
        """Register a hook run with the error that terminated the stream."""
        self._error_callbacks.append(callback)

    def complete(self) -> None:
        """Close the stream. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._queue.empty():
            # Wake a consumer blocked on an empty queue
            self._queue.put_nowait(None)

    async def events(self) -> AsyncIterator[str]:
        """Serve the stream as SSE frames.

        Yields:
            A retry hint, then one frame per event, plus keep-alive comments
            while idle.

        Raises:
            RuntimeError: If the stream is already being served.
        """
        if self._serving:
            raise RuntimeError("Stream is already being served")
        self._serving = True

        termination = StreamTermination.ERROR
        error: BaseException = StreamClosedError("Client disconnected")

        try:
            if self._retry_ms is not None:
                yield f"retry: {self._retry_ms}\n\n"

            while True:
                if self._closed and self._queue.empty():
                    termination = StreamTermination.COMPLETE
                    break

                remaining = self._deadline - time.monotonic()
                if remaining <= 0:
                    termination = StreamTermination.TIMEOUT
                    break

                try:
                    event = await asyncio.wait_for(
                        self._queue.get(),
                        timeout=min(remaining, self._heartbeat_interval),
                    )
                except TimeoutError:
                    if self._deadline - time.monotonic() > 0:
                        yield ": keep-alive\n\n"
                    continue

                if event is not None:
                    yield event.to_sse_format()

        except Exception as e:
            error = e
            raise
        finally:
            self._closed = True
            await self._terminate(termination, error)

    async def _terminate(
        self, termination: StreamTermination, error: BaseException
    ) -> None:
        """Fire the hooks for one termination kind, once.

        Hooks run in their own task so a cancelled response task cannot
        interrupt cleanup halfway.
        """
        if self._terminated:
            return
        self._terminated = True
        self._termination_task = asyncio.ensure_future(
            self._run_hooks(termination, error)
        )
        await asyncio.shield(self._termination_task)

    async def _run_hooks(
        self, termination: StreamTermination, error: BaseException
    ) -> None:
        if termination is StreamTermination.ERROR:
            for error_callback in self._error_callbacks:
                await self._run_hook(termination, error_callback(error))
            return

        callbacks = (
            self._completion_callbacks
            if termination is StreamTermination.COMPLETE
            else self._timeout_callbacks
        )
        for callback in callbacks:
            await self._run_hook(termination, callback())

    async def _run_hook(
        self, termination: StreamTermination, hook: Awaitable[None]
    ) -> None:
        try:
            await hook
        except Exception as e:
            self._logger.error(
                "SSE stream termination hook failed",
                error=e,
                termination=termination.value,
            )
