"""Validation helpers for input validation.

All validation functions return Result types for consistent error handling.

Usage:
    from sse_cluster.core.validation import validate_client_id
    from sse_cluster.core.result import Failure, Success

    match validate_client_id(raw_id):
        case Success(value=client_id):
            ...
        case Failure(error=error):
            raise ValueError(error.message)
"""

from typing import Any

from sse_cluster.core.constants import SSE_CLIENT_ID_MAX_LENGTH, SSE_MESSAGE_SEPARATOR
from sse_cluster.core.enums import ErrorCode
from sse_cluster.core.errors import ValidationError
from sse_cluster.core.result import Failure, Result, Success


def validate_not_empty(value: Any, field_name: str) -> Result[Any, ValidationError]:
    """Validate that a value is not empty.

    Args:
        value: Value to validate.
        field_name: Name of the field being validated.

    Returns:
        Success with value if not empty, Failure with ValidationError otherwise.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return Failure(
            error=ValidationError(
                code=ErrorCode.VALIDATION_FAILED,
                message=f"{field_name} cannot be empty",
                field=field_name,
            )
        )
    return Success(value=value)


def validate_max_length(
    value: str, max_length: int, field_name: str
) -> Result[str, ValidationError]:
    """Validate maximum string length.

    Args:
        value: String to validate.
        max_length: Maximum allowed length.
        field_name: Name of the field being validated.

    Returns:
        Success with value if valid, Failure with ValidationError otherwise.
    """
    if len(value) > max_length:
        return Failure(
            error=ValidationError(
                code=ErrorCode.VALIDATION_FAILED,
                message=f"{field_name} must be at most {max_length} characters",
                field=field_name,
            )
        )
    return Success(value=value)


def validate_client_id(client_id: Any) -> Result[str, ValidationError]:
    """Validate a client identifier used as registry and directory key.

    Rules:
        - Must be a non-blank string
        - At most SSE_CLIENT_ID_MAX_LENGTH characters
        - Must not contain SSE_MESSAGE_SEPARATOR (it delimits the client id
          in cross-instance payloads)

    Args:
        client_id: Candidate client identifier.

    Returns:
        Success with the client id, Failure with ValidationError otherwise.
    """
    if not isinstance(client_id, str):
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_CLIENT_ID,
                message="client_id must be a string",
                field="client_id",
            )
        )

    match validate_not_empty(client_id, "client_id"):
        case Failure(error=error):
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_CLIENT_ID,
                    message=error.message,
                    field="client_id",
                )
            )

    match validate_max_length(client_id, SSE_CLIENT_ID_MAX_LENGTH, "client_id"):
        case Failure(error=error):
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_CLIENT_ID,
                    message=error.message,
                    field="client_id",
                    details={"length": str(len(client_id))},
                )
            )

    if SSE_MESSAGE_SEPARATOR in client_id:
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_CLIENT_ID,
                message=f"client_id must not contain '{SSE_MESSAGE_SEPARATOR}'",
                field="client_id",
            )
        )

    return Success(value=client_id)


def validate_message(message: Any) -> Result[str, ValidationError]:
    """Validate a message payload.

    Payloads may be empty strings but must be strings.

    Args:
        message: Candidate payload.

    Returns:
        Success with the message, Failure with ValidationError otherwise.
    """
    if not isinstance(message, str):
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_MESSAGE,
                message="message must be a string",
                field="message",
            )
        )
    return Success(value=message)
