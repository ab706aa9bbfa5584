"""Logger audit adapter - authentication events as structured log lines.

Default audit backend (``AUDIT_BACKEND=logger``). Each event becomes one
INFO line named ``auth_login`` / ``auth_logout`` with resource
``authentication``; where the lines end up is the logging pipeline's
concern.
"""

from typing import Any
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import AuthEventKind
from src.domain.errors import AuditError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects.request_context import RequestContext


class LoggerAuditAdapter:
    """AuditProtocol implementation that writes to the structured logger.

    Does NOT inherit from AuditProtocol (structural typing).
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger.bind(audit=True)

    async def log_auth_event(
        self,
        *,
        user_id: UUID,
        tenant_id: UUID,
        kind: AuthEventKind,
        context: RequestContext | None = None,
        detail: dict[str, Any] | None = None,
    ) -> Result[None, AuditError]:
        request = context.to_dict() if context is not None else {}
        try:
            self._logger.info(
                kind.action,
                resource_type="authentication",
                user_id=str(user_id),
                tenant_id=str(tenant_id),
                **request,
                **(detail or {}),
            )
        except (TypeError, ValueError, OSError) as e:
            return Failure(
                error=AuditError(
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    message=f"Failed to log audit event: {e}",
                    details={"action": kind.action, "error_type": type(e).__name__},
                )
            )
        return Success(value=None)
