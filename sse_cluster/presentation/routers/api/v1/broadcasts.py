"""Broadcast Endpoints.

- POST /broadcasts   send one message to every connected client

Kept apart from /events/{client_id} so no client id is shadowed by a
fixed route.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from sse_cluster.core.container.sse import get_connection_manager
from sse_cluster.infrastructure.sse.connection_manager import ConnectionManager
from sse_cluster.schemas.event_schemas import BroadcastRequest

broadcasts_router = APIRouter(prefix="/broadcasts", tags=["Events"])


@broadcasts_router.post("", status_code=status.HTTP_202_ACCEPTED)
async def create_broadcast(
    data: BroadcastRequest,
    manager: Annotated[ConnectionManager, Depends(get_connection_manager)],
) -> Response:
    """Send a message to every connected client.

    With `local_only` the broker is skipped and only clients connected to
    the instance serving this request receive it.

    Returns:
        202 Accepted (delivery is fire-and-forget).
    """
    if data.local_only:
        await manager.broadcast_local(data.content)
    else:
        await manager.broadcast(data.content)
    return Response(status_code=status.HTTP_202_ACCEPTED)
