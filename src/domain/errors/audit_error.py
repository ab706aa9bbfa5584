"""Audit trail error types.

Used when recording an authentication event fails.

Usage:
    from src.core.enums import ErrorCode
    from src.core.result import Failure
    from src.domain.errors import AuditError

    return Failure(
        error=AuditError(
            code=ErrorCode.AUDIT_RECORD_FAILED,
            message="Failed to record audit entry: database connection lost",
        )
    )
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditError(DomainError):
    """Audit system failure.

    Audit failures are reported but never abort the session operation that
    triggered them.
    """

    pass
