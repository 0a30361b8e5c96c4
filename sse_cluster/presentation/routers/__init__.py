"""HTTP routers.

Usage:
    from sse_cluster.presentation.routers import system_router, v1_router
"""

from sse_cluster.presentation.routers.api.v1 import v1_router
from sse_cluster.presentation.routers.system import system_router

__all__ = ["system_router", "v1_router"]
