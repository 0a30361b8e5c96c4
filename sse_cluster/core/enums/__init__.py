"""Core enums package.

Usage:
    from sse_cluster.core.enums import BrokerBackend, Environment, ErrorCode
"""

from sse_cluster.core.enums.broker_backend import BrokerBackend
from sse_cluster.core.enums.environment import Environment
from sse_cluster.core.enums.error_code import ErrorCode

__all__ = ["BrokerBackend", "Environment", "ErrorCode"]
