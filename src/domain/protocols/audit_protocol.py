"""Audit trail protocol (port) for authentication events.

Session creation is recorded as ``login``, invalidation (manual logout,
concurrency-cap eviction, expiry) as ``logout``. Audit is best-effort from
the session manager's point of view: a failed write is logged and the
session operation continues.

Usage:
    result = await audit.log_auth_event(
        user_id=session.user_id,
        tenant_id=session.tenant_id,
        kind=AuthEventKind.LOGOUT,
        context=context,
        detail={"session_id": session.id, "reason": "manual_logout"},
    )
    if isinstance(result, Failure):
        logger.warning("audit_failed", error=result.error.message)
"""

from typing import Any, Protocol
from uuid import UUID

from src.core.result import Result
from src.domain.enums import AuthEventKind
from src.domain.errors import AuditError
from src.domain.value_objects.request_context import RequestContext


class AuditProtocol(Protocol):
    """Protocol for authentication audit trails.

    Implementations:
        - LoggerAuditAdapter: structured log line per event
        - DatabaseAuditAdapter: one ``auth_audit_events`` row per event

    Error Handling:
        Return ``Failure(error=AuditError(...))`` instead of raising.
    """

    async def log_auth_event(
        self,
        *,
        user_id: UUID,
        tenant_id: UUID,
        kind: AuthEventKind,
        context: RequestContext | None = None,
        detail: dict[str, Any] | None = None,
    ) -> Result[None, AuditError]:
        """Record one authentication event.

        Args:
            user_id: User the event concerns.
            tenant_id: Tenant the session belongs to.
            kind: LOGIN or LOGOUT.
            context: Request that triggered the event (None for background
                work such as expiry during a sweep).
            detail: Extra JSON context (session_id, expires_at, reason).

        Returns:
            Success(value=None) once recorded, Failure(error=AuditError)
            otherwise.
        """
        ...
