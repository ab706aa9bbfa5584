"""Database audit adapter - authentication events as table rows.

Selected with ``AUDIT_BACKEND=database``. Each event is inserted into
``auth_audit_events`` in its own short transaction, independent of the
session store's transactions, so an audit failure never rolls back a
session change.

Usage:
    adapter = DatabaseAuditAdapter(database)
    result = await adapter.log_auth_event(
        user_id=user_id,
        tenant_id=tenant_id,
        kind=AuthEventKind.LOGIN,
        context=context,
        detail={"session_id": session_id},
    )
"""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import AuthEventKind
from src.domain.errors import AuditError
from src.domain.value_objects.request_context import RequestContext
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.auth_audit_event import (
    AuthAuditEventModel,
)


class DatabaseAuditAdapter:
    """AuditProtocol implementation backed by ``auth_audit_events``.

    Stateless; every call opens its own session from the Database.

    Attributes:
        _database: Database providing the session factory.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def log_auth_event(
        self,
        *,
        user_id: UUID,
        tenant_id: UUID,
        kind: AuthEventKind,
        context: RequestContext | None = None,
        detail: dict[str, Any] | None = None,
    ) -> Result[None, AuditError]:
        """Insert one audit row.

        ``detail["session_id"]`` is lifted into its own column; the rest of
        ``detail`` is stored as JSON.

        Returns:
            Success(None), or Failure(AuditError) with AUDIT_RECORD_FAILED
            when the insert fails.
        """
        details = dict(detail or {})
        session_id = details.pop("session_id", None)
        event = AuthAuditEventModel(
            user_id=user_id,
            tenant_id=tenant_id,
            action=kind.action,
            resource_type="authentication",
            session_id=session_id,
            ip_address=context.ip_address if context else None,
            user_agent=context.user_agent if context else None,
            path=context.path if context else None,
            details=details or None,
        )

        try:
            async with self._database.get_session() as db:
                db.add(event)
        except (SQLAlchemyError, OSError) as e:
            return Failure(
                error=AuditError(
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    message=f"Failed to record audit event: {e}",
                    details={
                        "action": kind.action,
                        "error_type": type(e).__name__,
                    },
                )
            )

        return Success(value=None)
