"""Unit tests for the SSE message envelope and stream event.

Tests cover:
- SSEMessage defaults (sender, kind, id, timestamp) and immutability
- to_dict() JSON-serializable shape
- StreamEvent.from_message() and to_sse_format() wire format

Architecture:
    - Unit tests for domain layer (no dependencies)
"""

import dataclasses
import json
from datetime import UTC, datetime

import pytest

from sse_cluster.domain.events.sse_message import MessageKind, SSEMessage, StreamEvent


@pytest.mark.unit
class TestSSEMessage:
    """Test SSEMessage creation."""

    def test_defaults(self):
        """Test sender, kind, id and timestamp defaults."""
        before = datetime.now(UTC)
        message = SSEMessage(content="hello")

        assert message.content == "hello"
        assert message.sender == "system"
        assert message.kind is MessageKind.TEXT
        assert message.id
        assert message.timestamp.tzinfo is not None
        assert message.timestamp >= before

    def test_ids_are_unique(self):
        """Test each message gets its own id."""
        assert SSEMessage(content="a").id != SSEMessage(content="a").id

    def test_is_immutable(self):
        """Test frozen dataclass rejects assignment."""
        message = SSEMessage(content="hello")

        with pytest.raises(dataclasses.FrozenInstanceError):
            message.content = "changed"  # type: ignore[misc]

    def test_to_dict(self):
        """Test to_dict() returns JSON-serializable fields."""
        timestamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        message = SSEMessage(
            content="disk full",
            sender="monitor",
            kind=MessageKind.ALERT,
            id="msg-1",
            timestamp=timestamp,
        )

        data = message.to_dict()

        assert data == {
            "id": "msg-1",
            "content": "disk full",
            "sender": "monitor",
            "timestamp": "2024-01-02T03:04:05+00:00",
            "kind": "ALERT",
        }
        json.dumps(data)


@pytest.mark.unit
class TestStreamEvent:
    """Test StreamEvent wrapping and wire format."""

    def test_from_message_uses_message_id(self):
        """Test event id mirrors the message id."""
        message = SSEMessage(content="hello")

        event = StreamEvent.from_message(message)

        assert event.id == message.id
        assert event.name == "message"
        assert event.data == message.to_dict()

    def test_to_sse_format(self):
        """Test id/event/data lines terminated by a blank line."""
        event = StreamEvent(id="evt-1", data={"content": "hello"})

        frame = event.to_sse_format()

        assert frame == 'id: evt-1\nevent: message\ndata: {"content": "hello"}\n\n'

    def test_to_sse_format_keeps_data_on_one_line(self):
        """Test newlines in content are escaped inside the JSON data line."""
        event = StreamEvent(id="evt-1", data={"content": "line1\nline2"})

        lines = event.to_sse_format().split("\n")

        assert lines[2] == 'data: {"content": "line1\\nline2"}'
        assert json.loads(lines[2][len("data: ") :])["content"] == "line1\nline2"
