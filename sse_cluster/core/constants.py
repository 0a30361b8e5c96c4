"""Centralized constants for internal implementation details.

This module contains constants that are internal implementation details,
NOT environment-specific configuration. For environment-specific settings,
use `sse_cluster/core/config.py` instead.

Categories:
- Stream lifetime and buffering defaults
- Broker directory and channel naming
- Cross-instance wire envelope
- Validation limits

Example:
    >>> from sse_cluster.core.constants import SSE_MESSAGE_SEPARATOR
    >>> payload = f"{client_id}{SSE_MESSAGE_SEPARATOR}{message}"
"""

# =============================================================================
# Streams
# =============================================================================

SSE_STREAM_TIMEOUT_SECONDS: int = 30 * 60
"""Default stream lifetime (30 minutes) before the timeout hook fires."""

SSE_STREAM_QUEUE_SIZE: int = 256
"""Default number of undelivered events buffered per stream."""

SSE_HEARTBEAT_INTERVAL_SECONDS: int = 30
"""Interval between SSE heartbeat comments to detect stale connections."""

SSE_RETRY_INTERVAL_MS: int = 3000
"""Client reconnection interval hint (milliseconds)."""

SSE_EVENT_NAME: str = "message"
"""SSE event name used for every pushed message."""

SSE_DEFAULT_SENDER: str = "system"
"""Sender label attached to messages pushed by the service."""


# =============================================================================
# Broker directory and channels
# =============================================================================

SSE_CHANNEL_PREFIX: str = "sse"
"""Redis key/channel prefix for SSE routing."""

SSE_CLIENT_TTL_SECONDS: int = 3600
"""Default TTL of a client -> instance directory entry (1 hour)."""

SSE_CLIENT_REFRESH_INTERVAL_SECONDS: int = 1200
"""Default interval between directory refreshes of local clients."""

SSE_PUBSUB_POLL_TIMEOUT_SECONDS: float = 1.0
"""How long the pub/sub listener blocks waiting for one message."""

SSE_PUBSUB_RECONNECT_DELAY_SECONDS: float = 1.0
"""Pause before the pub/sub listener retries after a backend error."""


# =============================================================================
# Wire envelope
# =============================================================================

SSE_MESSAGE_SEPARATOR: str = "::"
"""Separator between client id and payload on instance channels."""


# =============================================================================
# Validation limits
# =============================================================================

SSE_CLIENT_ID_MAX_LENGTH: int = 256
"""Maximum accepted client identifier length."""
