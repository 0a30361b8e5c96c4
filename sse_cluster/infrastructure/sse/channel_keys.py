"""Redis key and channel naming conventions for SSE routing.

All SSE-related Redis keys are generated here to avoid magic strings.

Key/Channel Patterns:
    sse:client:{client_id}        - Directory entry (client -> instance), with TTL
    sse:channel:{instance_id}     - Per-instance delivery channel (pub/sub)
    sse:broadcast                 - Global broadcast channel (pub/sub)
"""

from sse_cluster.core.constants import SSE_CHANNEL_PREFIX


class SSEChannelKeys:
    """Centralized Redis key generation for SSE.

    Note:
        Prefix comes from sse_cluster/core/constants.py.

    Example:
        >>> SSEChannelKeys.instance_channel("web-1-3fa2c9d1")
        'sse:channel:web-1-3fa2c9d1'
    """

    @staticmethod
    def client_key(client_id: str) -> str:
        """Get the directory key for a client.

        Args:
            client_id: Logical client identifier.

        Returns:
            Key whose value is the owning instance id.
        """
        return f"{SSE_CHANNEL_PREFIX}:client:{client_id}"

    @staticmethod
    def instance_channel(instance_id: str) -> str:
        """Get the pub/sub channel an instance listens on.

        Args:
            instance_id: Instance identifier.

        Returns:
            Channel name for messages addressed to that instance's clients.
        """
        return f"{SSE_CHANNEL_PREFIX}:channel:{instance_id}"

    @staticmethod
    def broadcast_channel() -> str:
        """Get the pub/sub channel shared by every instance.

        Returns:
            Channel name for global broadcasts.
        """
        return f"{SSE_CHANNEL_PREFIX}:broadcast"

    @staticmethod
    def is_broadcast_channel(channel: str) -> bool:
        """Check if channel is the broadcast channel.

        Args:
            channel: Channel name to check.

        Returns:
            True if broadcast channel, False otherwise.
        """
        return channel == SSEChannelKeys.broadcast_channel()
