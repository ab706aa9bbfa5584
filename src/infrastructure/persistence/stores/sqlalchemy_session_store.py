"""SQLAlchemy implementation of SessionStoreProtocol.

Adapter for hexagonal architecture. Maps between UserSession entities and
UserSessionModel rows.

Every method runs in its own short transaction from ``Database.get_session``.
Lifecycle transitions are single conditional UPDATE statements, so they are
atomic in the database and the returned rowcount tells the caller whether
this call won the transition.

Errors:
    SQLAlchemy exceptions propagate; the session manager bounds each call
    with a timeout and maps failures to SESSION_STORE_UNAVAILABLE.
"""

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update

from src.domain.entities.user_session import UserSession
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.user_session import UserSessionModel


class SQLAlchemySessionStore:
    """Relational session store.

    Does NOT inherit from SessionStoreProtocol (structural typing).

    Example:
        >>> store = SQLAlchemySessionStore(database)
        >>> await store.insert(session)
        >>> await store.find_active_by_id(session.id)
    """

    def __init__(self, database: Database) -> None:
        """Initialize store.

        Args:
            database: Database whose session factory is used per call.
        """
        self._database = database

    async def insert(self, session: UserSession) -> None:
        async with self._database.get_session() as db:
            db.add(self._to_model(session))

    async def find_active_by_id(self, session_id: str) -> UserSession | None:
        stmt = select(UserSessionModel).where(
            UserSessionModel.id == session_id,
            UserSessionModel.is_active.is_(True),
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model is not None else None

    async def update_access_and_expiry(
        self,
        session_id: str,
        last_accessed_at: datetime,
        expires_at: datetime,
    ) -> bool:
        """Record an access; only active rows are touched.

        Returns:
            True if a row was updated.
        """
        stmt = (
            update(UserSessionModel)
            .where(
                UserSessionModel.id == session_id,
                UserSessionModel.is_active.is_(True),
            )
            .values(last_accessed_at=last_accessed_at, expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return (cast(Any, result).rowcount or 0) > 0

    async def invalidate(self, session_id: str, invalidated_at: datetime) -> bool:
        """Compare-and-set active -> inactive.

        Returns:
            True only if this call performed the transition.
        """
        stmt = (
            update(UserSessionModel)
            .where(
                UserSessionModel.id == session_id,
                UserSessionModel.is_active.is_(True),
            )
            .values(is_active=False, invalidated_at=invalidated_at)
            .execution_options(synchronize_session=False)
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return (cast(Any, result).rowcount or 0) > 0

    async def find_active_by_user(self, user_id: UUID) -> list[UserSession]:
        """Active sessions of a user, newest first by creation time."""
        stmt = (
            select(UserSessionModel)
            .where(
                UserSessionModel.user_id == user_id,
                UserSessionModel.is_active.is_(True),
            )
            .order_by(UserSessionModel.created_at.desc())
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return [self._to_entity(model) for model in result.scalars().all()]

    async def bulk_invalidate(
        self, session_ids: list[str], invalidated_at: datetime
    ) -> int:
        if not session_ids:
            return 0
        stmt = (
            update(UserSessionModel)
            .where(
                UserSessionModel.id.in_(session_ids),
                UserSessionModel.is_active.is_(True),
            )
            .values(is_active=False, invalidated_at=invalidated_at)
            .execution_options(synchronize_session=False)
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return cast(Any, result).rowcount or 0

    async def delete_expired_or_inactive(self, now: datetime) -> int:
        stmt = (
            delete(UserSessionModel)
            .where(
                or_(
                    UserSessionModel.expires_at < now,
                    UserSessionModel.is_active.is_(False),
                )
            )
            .execution_options(synchronize_session=False)
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return cast(Any, result).rowcount or 0

    async def count_users_over_cap(self, limit: int) -> int:
        """Users whose active session count exceeds ``limit``.

        ``SELECT count(*) FROM (SELECT user_id ... GROUP BY user_id
        HAVING count(*) > :limit)``
        """
        over_cap = (
            select(UserSessionModel.user_id)
            .where(UserSessionModel.is_active.is_(True))
            .group_by(UserSessionModel.user_id)
            .having(func.count() > limit)
            .subquery()
        )
        stmt = select(func.count()).select_from(over_cap)
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return result.scalar_one()

    # =========================================================================
    # Mapping methods
    # =========================================================================

    @staticmethod
    def _to_model(session: UserSession) -> UserSessionModel:
        return UserSessionModel(
            id=session.id,
            user_id=session.user_id,
            tenant_id=session.tenant_id,
            created_at=session.created_at,
            last_accessed_at=session.last_accessed_at,
            expires_at=session.expires_at,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            is_active=session.is_active,
            invalidated_at=session.invalidated_at,
            session_metadata=session.metadata,
        )

    @staticmethod
    def _to_entity(model: UserSessionModel) -> UserSession:
        return UserSession(
            id=model.id,
            user_id=model.user_id,
            tenant_id=model.tenant_id,
            created_at=_utc(model.created_at),
            last_accessed_at=_utc(model.last_accessed_at),
            expires_at=_utc(model.expires_at),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            is_active=model.is_active,
            invalidated_at=(
                _utc(model.invalidated_at) if model.invalidated_at else None
            ),
            metadata=model.session_metadata,
        )


def _utc(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
