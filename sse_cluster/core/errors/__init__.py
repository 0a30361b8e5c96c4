"""Core errors package.

Usage:
    from sse_cluster.core.errors import DomainError, ValidationError
"""

from sse_cluster.core.errors.common_errors import ValidationError
from sse_cluster.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
]
