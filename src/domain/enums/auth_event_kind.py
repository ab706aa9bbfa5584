"""Authentication event kinds recorded in the audit trail.

Usage:
    from src.domain.enums import AuthEventKind

    await audit.log_auth_event(
        user_id=session.user_id,
        tenant_id=session.tenant_id,
        kind=AuthEventKind.LOGIN,
        context=context,
        detail={"session_id": session.id},
    )
"""

from enum import Enum


class AuthEventKind(str, Enum):
    """Session lifecycle events emitted to the audit collaborator.

    The audit action name is ``auth_<value>``.
    """

    LOGIN = "login"
    LOGOUT = "logout"

    @property
    def action(self) -> str:
        """Audit action name (``auth_login`` / ``auth_logout``)."""
        return f"auth_{self.value}"
