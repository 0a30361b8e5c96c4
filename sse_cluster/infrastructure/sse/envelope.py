"""Cross-instance payload envelope.

Messages published on an instance channel carry the target client id in
front of the payload:

    <client_id>::<message>

This is the one bit-exact format shared by every deployment using the Redis
broker. Client ids are validated to never contain the separator, so the
FIRST separator always ends the client id and the message body may contain
"::" freely.
"""

from sse_cluster.core.constants import SSE_MESSAGE_SEPARATOR


def encode_client_envelope(client_id: str, message: str) -> str:
    """Build the instance-channel payload for one client.

    Args:
        client_id: Target client (must not contain the separator).
        message: Message payload.

    Returns:
        Single string payload.

    Raises:
        ValueError: If client_id is empty or contains the separator.
    """
    if not client_id or SSE_MESSAGE_SEPARATOR in client_id:
        raise ValueError(
            f"client_id must be non-empty and must not contain "
            f"'{SSE_MESSAGE_SEPARATOR}'"
        )
    return f"{client_id}{SSE_MESSAGE_SEPARATOR}{message}"


def decode_client_envelope(payload: str) -> tuple[str, str] | None:
    """Split an instance-channel payload into client id and message.

    Args:
        payload: Raw payload received from pub/sub.

    Returns:
        ``(client_id, message)``, or None when the payload has no separator
        or an empty client id.
    """
    separator_index = payload.find(SSE_MESSAGE_SEPARATOR)
    if separator_index <= 0:
        return None
    return (
        payload[:separator_index],
        payload[separator_index + len(SSE_MESSAGE_SEPARATOR) :],
    )
