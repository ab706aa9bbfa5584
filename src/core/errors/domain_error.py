"""Base domain error for railway-oriented error handling.

DomainError is the root of every error returned inside a ``Failure``. It is a
frozen dataclass, not an Exception: errors are values that flow back to the
caller, they are never raised.

Usage:
    @dataclass(frozen=True, slots=True, kw_only=True)
    class SessionError(DomainError):
        session_id: str | None = None
"""

from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
