"""Core shared kernel.

This module provides foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Base error classes for domain-level error handling
- Validation helpers for client identifiers and message payloads

The core module has NO dependencies on other application layers.
"""

from sse_cluster.core.enums import ErrorCode
from sse_cluster.core.errors import DomainError, ValidationError
from sse_cluster.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
    "ValidationError",
]
