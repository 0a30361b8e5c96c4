"""API v1 routers.

Resources:
    /api/v1/events/{client_id}            - Open a client's event stream
    /api/v1/events/{client_id}/messages   - Send a message to one client
    /api/v1/events/{client_id}/status     - Connection status
    /api/v1/broadcasts                    - Send a message to every client
"""

from fastapi import APIRouter

from sse_cluster.presentation.routers.api.v1.broadcasts import broadcasts_router
from sse_cluster.presentation.routers.api.v1.events import events_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(events_router)
v1_router.include_router(broadcasts_router)

__all__ = [
    "v1_router",
]
