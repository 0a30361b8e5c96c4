"""Result types for railway-oriented programming.

Operations that can fail in an expected way (validation, lookups) return a
Result instead of raising. Callers pattern-match on the outcome.

Usage:
    result = validate_client_id(client_id)
    match result:
        case Success(value=client_id):
            await manager.send_to_client(client_id, "hello")
        case Failure(error=error):
            logger.warning("Rejected client id", reason=error.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The produced value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: Error describing why the operation failed.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
