"""Session lifecycle error types.

Returned by the session manager whenever a session cannot be created,
validated, listed or invalidated.

Usage:
    from src.core.enums import ErrorCode
    from src.core.result import Failure
    from src.domain.errors import SessionError

    return Failure(
        error=SessionError(
            code=ErrorCode.SESSION_EXPIRED,
            message="Session has expired",
            session_id=session.id,
        )
    )
"""

from dataclasses import dataclass

from src.core.enums import ErrorCode
from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionError(DomainError):
    """Session operation failure.

    Attributes:
        code: ErrorCode (SESSION_NOT_FOUND, SESSION_EXPIRED,
            SESSION_INVALIDATED, SESSION_IP_MISMATCH,
            SESSION_STORE_UNAVAILABLE).
        message: Human-readable message.
        details: Additional context.
        session_id: Session the error refers to, when known.
    """

    session_id: str | None = None

    @property
    def is_unavailable(self) -> bool:
        """True when the failure came from the backing store, not the session."""
        return self.code == ErrorCode.SESSION_STORE_UNAVAILABLE
