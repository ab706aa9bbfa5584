"""Base model for all database tables.

Provides ``id`` (UUIDv7 primary key) and ``created_at`` to every model.
Models are an infrastructure concern: domain entities never inherit from
them and stores map rows to entities explicitly.

Usage:
    class AuthAuditEventModel(BaseModel):
        __tablename__ = "auth_audit_events"
        action: Mapped[str] = mapped_column(String(50))

Tables whose primary key is not a UUID (``user_sessions`` uses the opaque
session token) override ``id``.
"""

from datetime import datetime
from typing import Any
from uuid import UUID as PythonUUID

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from uuid_extensions import uuid7


class BaseModel(DeclarativeBase):
    """Declarative base with ``id`` and ``created_at``.

    Uses SQLAlchemy's generic Uuid type so the same models run on
    PostgreSQL and on SQLite in tests.
    """

    __abstract__ = True

    id: Mapped[PythonUUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid7,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary (for debugging/logging)."""
        return {
            "id": str(self.id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
