"""Container module - Centralized dependency injection.

This module re-exports all factory functions from submodules:

    from sse_cluster.core.container import get_connection_manager, get_logger

The container is organized into modules by concern:
- infrastructure: Core services (logging, Redis client)
- sse: Instance identity, message broker, connection manager
"""

# Infrastructure services
from sse_cluster.core.container.infrastructure import get_logger, get_redis_client

# SSE
from sse_cluster.core.container.sse import (
    generate_instance_id,
    get_connection_manager,
    get_instance_id,
    get_message_broker,
)

__all__ = [
    # Infrastructure
    "get_logger",
    "get_redis_client",
    # SSE
    "generate_instance_id",
    "get_connection_manager",
    "get_instance_id",
    "get_message_broker",
]
