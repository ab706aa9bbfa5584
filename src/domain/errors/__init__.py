"""Domain errors package.

Usage:
    from src.domain.errors import AuditError, SessionError
"""

from src.domain.errors.audit_error import AuditError
from src.domain.errors.session_error import SessionError

__all__ = [
    "AuditError",
    "SessionError",
]
