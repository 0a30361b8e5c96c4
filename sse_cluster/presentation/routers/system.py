"""System router for non-versioned application endpoints.

Provides external-facing system endpoints that are not part of the
versioned API contract, such as root, health, and configuration.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from sse_cluster.core.config import settings
from sse_cluster.core.container.sse import get_connection_manager
from sse_cluster.infrastructure.sse.connection_manager import ConnectionManager
from sse_cluster.schemas.event_schemas import HealthResponse

system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - basic status check.

    Returns:
        dict[str, str]: Service name, status and version.
    """
    return {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health", response_model=HealthResponse)
async def health(
    manager: Annotated[ConnectionManager, Depends(get_connection_manager)],
) -> JSONResponse:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        JSONResponse: 200 when the broker answers, 503 otherwise.
    """
    broker_available = await manager.broker.is_available()
    body = HealthResponse(
        status="healthy" if broker_available else "degraded",
        instance_id=manager.instance_id,
        broker_available=broker_available,
        local_clients=manager.local_count(),
    )
    return JSONResponse(
        status_code=(
            status.HTTP_200_OK
            if broker_available
            else status.HTTP_503_SERVICE_UNAVAILABLE
        ),
        content=body.model_dump(),
    )


@system_router.get("/config")
async def get_config() -> JSONResponse:
    """Configuration debug endpoint (development only).

    Returns:
        JSONResponse: Configuration details (sanitized) or 403 in
            non-development environments.
    """
    if not settings.is_development:
        return JSONResponse(
            status_code=403,
            content={"detail": "Config endpoint only available in development"},
        )

    return JSONResponse(
        content={
            "environment": settings.environment.value,
            "debug": settings.debug,
            "api": {
                "name": settings.app_name,
                "version": settings.app_version,
            },
            "sse": {
                "broker": settings.sse_broker.value,
                "redis_url": "<redacted>",  # Never expose credentials
                "stream_timeout_seconds": settings.sse_stream_timeout_seconds,
                "client_ttl_seconds": settings.sse_client_ttl_seconds,
                "client_refresh_interval_seconds": (
                    settings.sse_client_refresh_interval_seconds
                ),
            },
        }
    )
