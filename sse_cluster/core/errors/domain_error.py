"""Base domain error class for Railway-Oriented Programming.

DomainError is the base class for expected failures. It is NOT an
Exception: errors flow through the system as data inside ``Failure``
and are only converted to exceptions at a boundary that must reject
the call outright (e.g. ``ConnectionManager`` raising ``ValueError``).
"""

from dataclasses import dataclass

from sse_cluster.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
