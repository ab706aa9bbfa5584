"""Authentication audit event database model.

Append-only record of session logins and logouts written by
DatabaseAuditAdapter. Rows are never updated.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class AuthAuditEventModel(BaseModel):
    """``auth_audit_events`` table.

    Fields:
        id / created_at: from BaseModel (UUIDv7, insert time)
        user_id, tenant_id: who and where
        action: ``auth_login`` or ``auth_logout``
        resource_type: always ``authentication``
        session_id: session the event concerns
        ip_address, user_agent, path: request that triggered the event
        details: extra JSON (expires_at, reason)
    """

    __tablename__ = "auth_audit_events"

    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    tenant_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)

    action: Mapped[str] = mapped_column(String(50), nullable=False)
    resource_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="authentication",
    )

    session_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    path: Mapped[str | None] = mapped_column(String(255), nullable=True)

    details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("idx_auth_audit_user_action", "user_id", "action"),
        Index("idx_auth_audit_tenant_created", "tenant_id", "created_at"),
    )
