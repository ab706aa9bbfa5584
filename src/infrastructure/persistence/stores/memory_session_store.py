"""In-memory implementation of SessionStoreProtocol.

Dict-backed store for unit tests and local development
(``SESSION_STORE_BACKEND=memory``). Sessions are lost on restart and not
shared between processes.

Each method body runs without awaiting, so under asyncio every call is atomic
with respect to other coroutines; compare-and-set semantics hold exactly as
in the relational store.
"""

from collections import Counter
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from src.domain.entities.user_session import UserSession


class InMemorySessionStore:
    """Dict storage keyed by session id.

    Entities are copied on the way in and out so callers can never mutate
    stored state behind the store's back.

    Usage:
        store = InMemorySessionStore()
        await store.insert(session)
    """

    def __init__(self) -> None:
        self._sessions: dict[str, UserSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def insert(self, session: UserSession) -> None:
        """Store a new session.

        Raises:
            ValueError: If a session with the same id already exists.
        """
        if session.id in self._sessions:
            raise ValueError(f"Session {session.id[:8]}... already exists")
        self._sessions[session.id] = replace(session)

    async def find_active_by_id(self, session_id: str) -> UserSession | None:
        session = self._sessions.get(session_id)
        if session is None or not session.is_active:
            return None
        return replace(session)

    async def update_access_and_expiry(
        self,
        session_id: str,
        last_accessed_at: datetime,
        expires_at: datetime,
    ) -> bool:
        session = self._sessions.get(session_id)
        if session is None or not session.is_active:
            return False
        session.last_accessed_at = last_accessed_at
        session.expires_at = expires_at
        return True

    async def invalidate(self, session_id: str, invalidated_at: datetime) -> bool:
        session = self._sessions.get(session_id)
        if session is None or not session.is_active:
            return False
        session.is_active = False
        session.invalidated_at = invalidated_at
        return True

    async def find_active_by_user(self, user_id: UUID) -> list[UserSession]:
        sessions = [
            replace(session)
            for session in self._sessions.values()
            if session.user_id == user_id and session.is_active
        ]
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        return sessions

    async def bulk_invalidate(
        self, session_ids: list[str], invalidated_at: datetime
    ) -> int:
        count = 0
        for session_id in session_ids:
            if await self.invalidate(session_id, invalidated_at):
                count += 1
        return count

    async def delete_expired_or_inactive(self, now: datetime) -> int:
        doomed = [
            session_id
            for session_id, session in self._sessions.items()
            if session.expires_at < now or not session.is_active
        ]
        for session_id in doomed:
            del self._sessions[session_id]
        return len(doomed)

    async def count_users_over_cap(self, limit: int) -> int:
        per_user = Counter(
            session.user_id for session in self._sessions.values() if session.is_active
        )
        return sum(1 for count in per_user.values() if count > limit)
