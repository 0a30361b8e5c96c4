"""Server-Sent Events message envelope and stream event.

SSEMessage is the immutable value describing one pushed message. StreamEvent
is what actually gets written to a stream: the message wrapped with an SSE
event id and event name.

Architecture:
    - SSEMessage: Immutable dataclass built at send time, never persisted
    - MessageKind: Informational tag only (no behavioral branching)
    - StreamEvent: id/name/data triple handed to a stream handle
    - to_sse_format(): Serialization to SSE wire format (text/event-stream)

Wire Format (SSE spec):
    id: <message id>
    event: message
    data: <json payload>

Reference:
    - https://html.spec.whatwg.org/multipage/server-sent-events.html
"""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from uuid_extensions import uuid7

from sse_cluster.core.constants import SSE_DEFAULT_SENDER, SSE_EVENT_NAME


class MessageKind(StrEnum):
    """Kinds of pushed messages."""

    TEXT = "TEXT"
    NOTIFICATION = "NOTIFICATION"
    ALERT = "ALERT"
    SYSTEM = "SYSTEM"


@dataclass(frozen=True, kw_only=True, slots=True)
class SSEMessage:
    """One pushed message.

    Immutable after creation (frozen dataclass). The id doubles as the SSE
    event id so clients can correlate what they received.

    Attributes:
        content: Arbitrary string payload.
        sender: Origin label (defaults to the system sender).
        kind: Informational message kind.
        id: Unique identifier (UUID v7 string for temporal ordering).
        timestamp: Creation instant (UTC).

    Example:
        >>> msg = SSEMessage(content="hello")
        >>> msg.kind
        <MessageKind.TEXT: 'TEXT'>
    """

    content: str
    """Message payload."""

    sender: str = SSE_DEFAULT_SENDER
    """Origin label."""

    kind: MessageKind = MessageKind.TEXT
    """Informational tag."""

    id: str = field(default_factory=lambda: str(uuid7()))
    """Unique message identifier."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    """Creation instant (UTC)."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary.

        Returns:
            Dictionary representation of the message.
        """
        return {
            "id": self.id,
            "content": self.content,
            "sender": self.sender,
            "timestamp": self.timestamp.isoformat(),
            "kind": self.kind.value,
        }


@dataclass(frozen=True, kw_only=True, slots=True)
class StreamEvent:
    """A single event written to a stream handle.

    Attributes:
        id: SSE event id.
        data: Event payload (JSON serialized on the wire).
        name: SSE event name.
    """

    id: str
    data: dict[str, Any]
    name: str = SSE_EVENT_NAME

    @classmethod
    def from_message(cls, message: SSEMessage) -> "StreamEvent":
        """Wrap a message as a stream event.

        Args:
            message: Message to deliver.

        Returns:
            StreamEvent whose id is the message id.
        """
        return cls(id=message.id, data=message.to_dict())

    def to_sse_format(self) -> str:
        """Serialize to SSE wire format.

        Returns:
            SSE-formatted string ready for a streaming response.

        Example output:
            id: 0190f7b2-...
            event: message
            data: {"id": "0190f7b2-...", "content": "hello", ...}

        Note:
            Message ends with a blank line (SSE spec).
        """
        lines = [
            f"id: {self.id}",
            f"event: {self.name}",
            f"data: {json.dumps(self.data)}",
            "",  # Empty line terminates the message
        ]
        return "\n".join(lines) + "\n"
