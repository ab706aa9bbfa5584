"""Database models for the persistence layer.

Infrastructure only; domain entities live in src/domain/entities/ and are
mapped by the stores.

Models:
    - user_session.py: ``user_sessions``
    - auth_audit_event.py: ``auth_audit_events`` (append-only)
"""

from src.infrastructure.persistence.models.auth_audit_event import (
    AuthAuditEventModel,
)
from src.infrastructure.persistence.models.user_session import UserSessionModel

__all__ = [
    "AuthAuditEventModel",
    "UserSessionModel",
]
