"""
Main FastAPI application entry point.

This module initializes the FastAPI application instance, wires the SSE
connection manager into the application lifespan and mounts the routers.

Run:
    uvicorn sse_cluster.main:app --host 0.0.0.0 --port 8000
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sse_cluster.core.config import settings
from sse_cluster.presentation.routers import system_router, v1_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: Subscribe this instance to its broker channels
    - Shutdown: Close local streams, then release the broker

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    from sse_cluster.core.container import get_connection_manager, get_logger

    logger = get_logger()
    manager = get_connection_manager()

    await manager.start()
    logger.info(
        "Application started",
        app_name=settings.app_name,
        environment=settings.environment.value,
        broker=settings.sse_broker.value,
        instance_id=manager.instance_id,
    )

    yield

    await manager.shutdown()
    await manager.broker.close()
    logger.info("Application stopped", instance_id=manager.instance_id)


# Initialize FastAPI application with settings and lifespan
app = FastAPI(
    title=settings.app_name,
    description="Horizontally scalable Server-Sent Events delivery",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(system_router)
app.include_router(v1_router)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "sse_cluster.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
