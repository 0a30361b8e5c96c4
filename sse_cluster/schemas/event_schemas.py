"""Event request and response schemas.

Pydantic schemas for the events API endpoints. Includes:
- Request schemas (client -> API)
- Response schemas (API -> client)
"""

from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================


class SendMessageRequest(BaseModel):
    """Message addressed to one client.

    Attributes:
        content: Message payload.
    """

    content: str = Field(..., description="Message payload", examples=["hello"])


class BroadcastRequest(BaseModel):
    """Message addressed to every connected client.

    Attributes:
        content: Message payload.
        local_only: Deliver to this instance's clients only.
    """

    content: str = Field(..., description="Message payload", examples=["ping"])
    local_only: bool = Field(
        default=False,
        description="Skip the broker and deliver to this instance's clients only",
    )


# =============================================================================
# Response Schemas
# =============================================================================


class SendMessageResponse(BaseModel):
    """Outcome of a send.

    Attributes:
        client_id: Target client.
        routed: True if delivered locally or routed to the owning instance.
    """

    client_id: str = Field(..., description="Target client")
    routed: bool = Field(
        ..., description="Delivered locally or handed to the owning instance"
    )


class ClientStatusResponse(BaseModel):
    """Connection status of one client."""

    client_id: str = Field(..., description="Client identifier")
    connected: bool = Field(..., description="Connected on any instance")
    local: bool = Field(..., description="Connected on this instance")


class HealthResponse(BaseModel):
    """Health of this instance."""

    status: str = Field(..., description="healthy or degraded", examples=["healthy"])
    instance_id: str = Field(..., description="Identity of this instance")
    broker_available: bool = Field(..., description="Broker liveness probe result")
    local_clients: int = Field(..., description="Streams open on this instance")
