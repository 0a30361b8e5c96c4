"""LoggerProtocol definition for structured logging.

All components log through this protocol so the backend (structlog console
renderer today) stays swappable. Calls are structured: a constant message
plus key-value context, never interpolated strings.

Log Levels:
    - DEBUG: Per-message routing detail (publish, drop, refresh)
    - INFO: Stream lifecycle (created, completed, timed out, closed)
    - WARNING: Degraded delivery (backend errors swallowed, malformed payloads)
    - ERROR: Stream errors, unexpected failures inside handlers
    - CRITICAL: Reserved for total backend loss

Usage:
    from sse_cluster.core.container import get_logger

    logger = get_logger()
    logger.info("SSE stream created", client_id=client_id, connection_id=conn_id)

    # Component-scoped logging with bind()
    broker_logger = logger.bind(component="redis_broker", instance_id=instance_id)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def error(
        self, message: str, /, *, error: BaseException | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: BaseException | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for catastrophic failures.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance.
            **context: Structured key-value context fields.
        """
        ...

    def bind(self, **context: Any) -> "LoggerProtocol":
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged.

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...

    def with_context(self, **context: Any) -> "LoggerProtocol":
        """Alias for bind().

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...
