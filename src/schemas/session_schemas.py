"""Session API response schemas.

Pydantic models for session endpoint serialization. Kept separate from the
UserSession entity - these are HTTP-layer concerns and never expose the
session token of sessions other than the caller's own.

Endpoints:
    GET    /api/sessions          - List the caller's live sessions
    DELETE /api/sessions/current  - Log out the current session
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities.user_session import UserSession


# =============================================================================
# Session Response (shared)
# =============================================================================


class SessionResponse(BaseModel):
    """Response schema for a single session (list item)."""

    session_hint: str = Field(
        ...,
        description="First characters of the session token, for display only",
    )
    ip_address: str | None = Field(None, description="IP address at login")
    user_agent: str | None = Field(None, description="User agent at login")
    created_at: datetime = Field(..., description="When the session was created")
    last_accessed_at: datetime = Field(..., description="Last validated request")
    expires_at: datetime = Field(..., description="Current expiry")
    is_current: bool = Field(
        default=False,
        description="Whether this is the session making the request",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "session_hint": "q7Zt0b1K",
                "ip_address": "10.0.0.5",
                "user_agent": "Mozilla/5.0",
                "created_at": "2026-01-15T08:00:00Z",
                "last_accessed_at": "2026-01-15T11:42:00Z",
                "expires_at": "2026-01-15T16:00:00Z",
                "is_current": True,
            }
        }
    )

    @classmethod
    def from_entity(
        cls, session: UserSession, current_session_id: str | None = None
    ) -> "SessionResponse":
        """Build the response for ``session``."""
        return cls(
            session_hint=session.id[:8],
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            created_at=session.created_at,
            last_accessed_at=session.last_accessed_at,
            expires_at=session.expires_at,
            is_current=session.id == current_session_id,
        )


# =============================================================================
# List Sessions
# =============================================================================


class SessionListResponse(BaseModel):
    """Response schema for session list.

    GET /api/sessions
    Returns: 200 OK
    """

    user_id: UUID = Field(..., description="Owner of the sessions")
    sessions: list[SessionResponse] = Field(
        ...,
        description="Live sessions, most recently used first",
    )
    total_count: int = Field(..., description="Number of sessions returned")
