"""create_session_tables

Revision ID: 3f1c9a7d2b64
Revises:
Create Date: 2026-01-12 09:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b64"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create user_sessions and auth_audit_events tables."""
    op.create_table(
        "user_sessions",
        sa.Column(
            "id",
            sa.String(length=100),
            nullable=False,
            comment="Opaque session token",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            nullable=False,
            comment="User who owns this session",
        ),
        sa.Column(
            "tenant_id",
            sa.Uuid(),
            nullable=False,
            comment="Tenant the session was opened in",
        ),
        sa.Column("last_accessed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "ip_address",
            sa.String(length=45),
            nullable=True,
            comment="Client IP at creation (IPv4 or IPv6 text)",
        ),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("invalidated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_user_sessions_user_active",
        "user_sessions",
        ["user_id", "is_active"],
    )
    op.create_index(
        "idx_user_sessions_cleanup",
        "user_sessions",
        ["expires_at", "is_active"],
    )
    op.create_index(
        op.f("ix_user_sessions_tenant_id"),
        "user_sessions",
        ["tenant_id"],
    )

    op.create_table(
        "auth_audit_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("resource_type", sa.String(length=50), nullable=False),
        sa.Column("session_id", sa.String(length=100), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("path", sa.String(length=255), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_auth_audit_user_action",
        "auth_audit_events",
        ["user_id", "action"],
    )
    op.create_index(
        "idx_auth_audit_tenant_created",
        "auth_audit_events",
        ["tenant_id", "created_at"],
    )


def downgrade() -> None:
    """Drop user_sessions and auth_audit_events tables."""
    op.drop_index("idx_auth_audit_tenant_created", table_name="auth_audit_events")
    op.drop_index("idx_auth_audit_user_action", table_name="auth_audit_events")
    op.drop_table("auth_audit_events")

    op.drop_index(op.f("ix_user_sessions_tenant_id"), table_name="user_sessions")
    op.drop_index("idx_user_sessions_cleanup", table_name="user_sessions")
    op.drop_index("idx_user_sessions_user_active", table_name="user_sessions")
    op.drop_table("user_sessions")
