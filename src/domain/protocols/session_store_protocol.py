"""Session store protocol (port) for session persistence.

The session manager owns every lifecycle decision; the store only persists
what it is told. Two guarantees make concurrent requests safe without a
global lock:

    - ``invalidate`` and ``bulk_invalidate`` are compare-and-set on
      ``is_active`` (``UPDATE ... WHERE id = ? AND is_active``) and report
      whether a transition actually happened.
    - ``update_access_and_expiry`` is also conditioned on ``is_active``, so
      an access update racing an invalidation can never resurrect the
      session.

Error Handling:
    Store methods raise on backend failure (connection loss, timeouts). The
    session manager bounds every call with a timeout and converts failures
    into ``SessionError(code=SESSION_STORE_UNAVAILABLE)``.

Implementations:
    - SQLAlchemySessionStore: relational store via SQLAlchemy async
    - InMemorySessionStore: dict-backed, for tests and local development
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.user_session import UserSession


class SessionStoreProtocol(Protocol):
    """Persistence contract for user sessions."""

    async def insert(self, session: UserSession) -> None:
        """Persist a new session.

        Args:
            session: Fully built session (id already generated).
        """
        ...

    async def find_active_by_id(self, session_id: str) -> UserSession | None:
        """Fetch a session by id if it is still active.

        Expiry is not checked here; the manager decides what expiry means.

        Returns:
            The session, or None when missing or inactive.
        """
        ...

    async def update_access_and_expiry(
        self,
        session_id: str,
        last_accessed_at: datetime,
        expires_at: datetime,
    ) -> bool:
        """Record an access and (possibly unchanged) expiry in one write.

        Returns:
            True if an active row was updated, False otherwise.
        """
        ...

    async def invalidate(self, session_id: str, invalidated_at: datetime) -> bool:
        """Deactivate one session (compare-and-set).

        Returns:
            True only for the call that moved the row from active to inactive.
        """
        ...

    async def find_active_by_user(self, user_id: UUID) -> list[UserSession]:
        """List a user's active sessions, newest ``created_at`` first."""
        ...

    async def bulk_invalidate(
        self, session_ids: list[str], invalidated_at: datetime
    ) -> int:
        """Deactivate several sessions.

        Returns:
            Number of rows that were active and are now inactive.
        """
        ...

    async def delete_expired_or_inactive(self, now: datetime) -> int:
        """Physically remove sessions that expired before ``now`` or are inactive.

        Returns:
            Number of rows deleted.
        """
        ...

    async def count_users_over_cap(self, limit: int) -> int:
        """Count users holding more than ``limit`` active sessions.

        Two simultaneous logins can both pass the cap check; this makes the
        overshoot visible after a cleanup sweep.

        Returns:
            Number of distinct users above the cap.
        """
        ...
