"""Unit tests for SSE Redis key and channel naming."""

import pytest

from sse_cluster.infrastructure.sse.channel_keys import SSEChannelKeys


@pytest.mark.unit
class TestSSEChannelKeys:
    """Test key/channel generation."""

    def test_client_key(self):
        assert SSEChannelKeys.client_key("c1") == "sse:client:c1"

    def test_instance_channel(self):
        assert SSEChannelKeys.instance_channel("web-1") == "sse:channel:web-1"

    def test_broadcast_channel(self):
        assert SSEChannelKeys.broadcast_channel() == "sse:broadcast"

    def test_is_broadcast_channel(self):
        assert SSEChannelKeys.is_broadcast_channel("sse:broadcast") is True
        assert SSEChannelKeys.is_broadcast_channel("sse:channel:web-1") is False
