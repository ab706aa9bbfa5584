"""User session database model.

One row per authenticated session. The primary key is the opaque session
token itself (not a UUID), so lookups by token hit the primary key index.

Lifecycle columns:
    is_active / invalidated_at: one-way transition, written with
        compare-and-set updates (``WHERE is_active``)
    last_accessed_at / expires_at: refreshed by validation
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class UserSessionModel(BaseModel):
    """``user_sessions`` table.

    Indexes:
        - idx_user_sessions_user_active: (user_id, is_active) for the
          per-user active session list and concurrency cap
        - idx_user_sessions_cleanup: (expires_at, is_active) for the sweep
        - tenant_id for tenant-scoped administration
    """

    __tablename__ = "user_sessions"

    id: Mapped[str] = mapped_column(  # type: ignore[assignment]
        String(100),
        primary_key=True,
        comment="Opaque session token",
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        nullable=False,
        comment="User who owns this session",
    )

    tenant_id: Mapped[UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        comment="Tenant the session was opened in",
    )

    last_accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    ip_address: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
        default=None,
        comment="Client IP at creation (IPv4 or IPv6 text)",
    )

    user_agent: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    invalidated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    # "metadata" is reserved on declarative classes; the column keeps the name.
    session_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        default=None,
    )

    __table_args__ = (
        Index("idx_user_sessions_user_active", "user_id", "is_active"),
        Index("idx_user_sessions_cleanup", "expires_at", "is_active"),
    )
