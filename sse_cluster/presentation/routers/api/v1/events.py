"""SSE Events Endpoints.

Thin HTTP adapter over the ConnectionManager:
- GET    /events/{client_id}            open (or replace) the client's stream
- POST   /events/{client_id}/messages   send to one client, wherever it is
- DELETE /events/{client_id}            close the client's local stream
- GET    /events/{client_id}/status     connection status

Architecture:
    - Manager injected via Depends(get_connection_manager)
    - Malformed client ids (ValueError from the manager) map to 400
    - Authentication is left to the deployment (gateway / middleware)
"""

from typing import Annotated, cast

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from sse_cluster.core.container.sse import get_connection_manager
from sse_cluster.infrastructure.sse.connection_manager import ConnectionManager
from sse_cluster.infrastructure.sse.stream import SSEStream
from sse_cluster.schemas.event_schemas import (
    ClientStatusResponse,
    SendMessageRequest,
    SendMessageResponse,
)

events_router = APIRouter(prefix="/events", tags=["Events"])

Manager = Annotated[ConnectionManager, Depends(get_connection_manager)]


def _bad_request(error: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@events_router.get("/{client_id}")
async def get_events(
    client_id: str,
    manager: Manager,
    message: Annotated[
        str,
        Query(description="Initial message delivered when the stream opens"),
    ] = "connected",
) -> StreamingResponse:
    """Stream events for one client via Server-Sent Events (SSE).

    Opening a second stream for the same client closes the first one.

    Returns:
        StreamingResponse with SSE content type.
    """
    try:
        stream = await manager.create_stream(client_id, message)
    except ValueError as e:
        raise _bad_request(e) from e

    # The container always builds SSEStream handles
    sse_stream = cast(SSEStream, stream)

    return StreamingResponse(
        sse_stream.events(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx/Traefik buffering
        },
    )


@events_router.post("/{client_id}/messages", response_model=SendMessageResponse)
async def create_message(
    client_id: str, data: SendMessageRequest, manager: Manager
) -> JSONResponse:
    """Send a message to one client.

    Returns:
        202 if delivered locally or routed to the owning instance,
        404 if the client is not connected anywhere.
    """
    try:
        routed = await manager.send_to_client(client_id, data.content)
    except ValueError as e:
        raise _bad_request(e) from e

    body = SendMessageResponse(client_id=client_id, routed=routed)
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED if routed else status.HTTP_404_NOT_FOUND,
        content=body.model_dump(),
    )


@events_router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stream(client_id: str, manager: Manager) -> Response:
    """Close the client's stream on this instance (no-op if not local)."""
    try:
        await manager.close(client_id)
    except ValueError as e:
        raise _bad_request(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@events_router.get("/{client_id}/status", response_model=ClientStatusResponse)
async def get_status(client_id: str, manager: Manager) -> ClientStatusResponse:
    """Report whether the client is connected, and whether it is local."""
    try:
        connected = await manager.is_connected(client_id)
    except ValueError as e:
        raise _bad_request(e) from e

    return ClientStatusResponse(
        client_id=client_id,
        connected=connected,
        local=manager.is_local(client_id),
    )
