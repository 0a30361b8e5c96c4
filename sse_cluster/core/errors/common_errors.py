"""Common error classes shared by every layer.

Usage:
    from sse_cluster.core.errors import ValidationError
    from sse_cluster.core.enums import ErrorCode
    from sse_cluster.core.result import Failure

    return Failure(error=ValidationError(
        code=ErrorCode.INVALID_CLIENT_ID,
        message="client_id cannot be empty",
        field="client_id",
    ))
"""

from dataclasses import dataclass

from sse_cluster.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        field: Field name that failed validation.
        details: Additional context.
    """

    field: str | None = None
