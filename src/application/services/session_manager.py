"""Session manager - orchestrator for the complete session lifecycle.

Coordinates:
- Session store (persistence, compare-and-set transitions)
- Audit trail (login/logout events, best-effort)
- Optional cache mirror (``session:{id}`` read hint, never read back here)

Every validation re-reads the store. There is no in-process session cache,
so an invalidation is visible to the very next request on any instance.

Failure semantics:
    - Each store call is bounded by ``config.store_timeout``; any store
      exception or timeout becomes SESSION_STORE_UNAVAILABLE.
    - Audit and cache mirror failures are logged and never abort the
      operation.

Example:
    manager = SessionManager(
        store=SQLAlchemySessionStore(database),
        audit=LoggerAuditAdapter(logger),
        logger=logger,
        config=SessionConfig(),
    )

    result = await manager.create_session(user_id, tenant_id, context)
    match result:
        case Success(value=session):
            set_session_cookie(response, session, config)
        case Failure(error=err):
            ...
"""

import asyncio
import secrets
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.application.services.session_config import SessionConfig
from src.domain.entities.user_session import UserSession
from src.domain.enums import AuthEventKind, IpMismatchPolicy
from src.domain.errors import SessionError
from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.cache_keys_protocol import CacheKeysProtocol
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.session_store_protocol import SessionStoreProtocol
from src.domain.value_objects.request_context import RequestContext

SESSION_ID_BYTES = 32

# Invalidation reasons recorded in audit details.
REASON_MANUAL_LOGOUT = "manual_logout"
REASON_EXPIRED = "expired"
REASON_CONCURRENT_LIMIT = "concurrent_session_limit"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _short(session_id: str) -> str:
    # Never log full session tokens.
    return f"{session_id[:8]}..."


class _StoreUnavailable(Exception):
    """A session store call failed or timed out."""

    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.cause = cause


class SessionManager:
    """Session lifecycle service.

    Explicitly constructed and injected; there is no process-wide instance.

    Attributes:
        config: Effective session configuration.
        users_over_cap: Users above the concurrency cap at the last cleanup.
    """

    def __init__(
        self,
        *,
        store: SessionStoreProtocol,
        audit: AuditProtocol,
        logger: LoggerProtocol,
        config: SessionConfig | None = None,
        cache: CacheStoreProtocol | None = None,
        keys: CacheKeysProtocol | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize session manager.

        Args:
            store: Session persistence.
            audit: Audit trail for login/logout events.
            logger: Structured logger.
            config: Session configuration (defaults when omitted).
            cache: Cache store for the optional session mirror.
            keys: Cache key registry for the mirror (mirror is off without it).
            clock: Returns the current UTC time (tests inject a fixed clock).
        """
        self.config = config or SessionConfig()
        self._store = store
        self._audit = audit
        self._logger = logger.bind(component="session_manager")
        self._cache = cache
        self._keys = keys
        self._now = clock or _utcnow
        self._store_timeout = self.config.store_timeout.total_seconds()
        self.users_over_cap = 0

    # =========================================================================
    # Operations
    # =========================================================================

    async def create_session(
        self,
        user_id: UUID,
        tenant_id: UUID,
        context: RequestContext,
        metadata: dict[str, Any] | None = None,
    ) -> Result[UserSession, SessionError]:
        """Create a session for an already-authenticated user.

        When the user is at or above the concurrency cap, the oldest sessions
        are invalidated first so that, with the new one, exactly
        ``max_concurrent_sessions`` remain active.

        Args:
            user_id: Authenticated user.
            tenant_id: Tenant the user logged into.
            context: Request that triggered the login.
            metadata: Free-form JSON context stored with the session.

        Returns:
            Success(UserSession), or Failure(SessionError) with
            SESSION_STORE_UNAVAILABLE.
        """
        now = self._now()
        limit = self.config.max_concurrent_sessions

        try:
            active = await self._call(
                "find_active_by_user", self._store.find_active_by_user(user_id)
            )
            if len(active) >= limit:
                evicted = active[limit - 1 :]
                count = await self._call(
                    "bulk_invalidate",
                    self._store.bulk_invalidate([s.id for s in evicted], now),
                )
                self._logger.info(
                    "session_limit_enforced",
                    user_id=str(user_id),
                    limit=limit,
                    invalidated=count,
                )
                # Evictions are committed even if the insert below fails.
                for old in evicted:
                    await self._record(
                        old,
                        AuthEventKind.LOGOUT,
                        context,
                        reason=REASON_CONCURRENT_LIMIT,
                    )
                    await self._drop_mirror(old.id)

            session = UserSession(
                id=secrets.token_urlsafe(SESSION_ID_BYTES),
                user_id=user_id,
                tenant_id=tenant_id,
                created_at=now,
                last_accessed_at=now,
                expires_at=now + self.config.max_age,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                metadata=metadata,
            )
            await self._call("insert", self._store.insert(session))
        except _StoreUnavailable as e:
            return self._store_failure(e)

        await self._record(
            session,
            AuthEventKind.LOGIN,
            context,
            expires_at=session.expires_at.isoformat(),
        )
        await self._mirror(session)

        self._logger.info(
            "session_created",
            session_id=_short(session.id),
            user_id=str(user_id),
            tenant_id=str(tenant_id),
            expires_at=session.expires_at.isoformat(),
        )
        return Success(value=session)

    async def validate_session(
        self,
        session_id: str,
        context: RequestContext | None = None,
    ) -> Result[UserSession, SessionError]:
        """Validate a session token and record the access.

        Order of checks:
            1. Active session exists (else SESSION_NOT_FOUND)
            2. Not expired (else invalidated with reason ``expired`` and
               SESSION_EXPIRED)
            3. IP policy (REJECT gives SESSION_IP_MISMATCH, row stays active)
            4. One conditional update of last_accessed_at and expiry; the
               expiry slides to ``now + max_age`` when less than
               ``renewal_threshold`` remains, and never moves backwards
            5. Update matched no active row (concurrent logout) gives
               SESSION_INVALIDATED

        Returns:
            Success(refreshed UserSession) or Failure(SessionError).
        """
        now = self._now()

        try:
            session = await self._call(
                "find_active_by_id", self._store.find_active_by_id(session_id)
            )
        except _StoreUnavailable as e:
            return self._store_failure(e, session_id=session_id)

        if session is None:
            return Failure(
                error=SessionError(
                    code=ErrorCode.SESSION_NOT_FOUND,
                    message="Session not found or no longer active",
                    session_id=session_id,
                )
            )

        if session.is_expired(now):
            await self._expire(session, now, context)
            return Failure(
                error=SessionError(
                    code=ErrorCode.SESSION_EXPIRED,
                    message="Session has expired",
                    session_id=session_id,
                )
            )

        mismatch = self._check_ip(session, context)
        if mismatch is not None:
            return Failure(error=mismatch)

        new_expiry = session.expires_at
        if session.needs_renewal(now, self.config.renewal_threshold):
            new_expiry = max(session.expires_at, now + self.config.max_age)

        try:
            updated = await self._call(
                "update_access_and_expiry",
                self._store.update_access_and_expiry(session.id, now, new_expiry),
            )
        except _StoreUnavailable as e:
            return self._store_failure(e, session_id=session_id)

        if not updated:
            return Failure(
                error=SessionError(
                    code=ErrorCode.SESSION_INVALIDATED,
                    message="Session was invalidated",
                    session_id=session_id,
                )
            )

        renewed = new_expiry != session.expires_at
        session.last_accessed_at = now
        session.expires_at = new_expiry
        if renewed:
            self._logger.info(
                "session_renewed",
                session_id=_short(session.id),
                expires_at=new_expiry.isoformat(),
            )
            await self._mirror(session)
        return Success(value=session)

    async def invalidate_session(
        self,
        session_id: str,
        reason: str = REASON_MANUAL_LOGOUT,
        context: RequestContext | None = None,
    ) -> Result[bool, SessionError]:
        """Invalidate a session (idempotent).

        Args:
            session_id: Session token.
            reason: Recorded in the audit event.
            context: Request that triggered the logout.

        Returns:
            Success(True) if this call deactivated the session,
            Success(False) if it was missing or already inactive.
        """
        now = self._now()

        try:
            session = await self._call(
                "find_active_by_id", self._store.find_active_by_id(session_id)
            )
            if session is None:
                return Success(value=False)
            transitioned = await self._call(
                "invalidate", self._store.invalidate(session_id, now)
            )
        except _StoreUnavailable as e:
            return self._store_failure(e, session_id=session_id)

        if not transitioned:
            return Success(value=False)

        await self._record(session, AuthEventKind.LOGOUT, context, reason=reason)
        await self._drop_mirror(session_id)
        self._logger.info(
            "session_invalidated", session_id=_short(session_id), reason=reason
        )
        return Success(value=True)

    async def cleanup_expired_sessions(self) -> int:
        """Delete expired and inactive sessions, then check the concurrency cap.

        Simultaneous logins can leave a user above ``max_concurrent_sessions``.
        The sweep counts such users into ``users_over_cap`` and logs
        ``session_cap_exceeded``; the extra sessions are left alone.

        Returns:
            Number of rows removed (0 when the store is unavailable).
        """
        try:
            deleted = await self._call(
                "delete_expired_or_inactive",
                self._store.delete_expired_or_inactive(self._now()),
            )
        except _StoreUnavailable as e:
            self._logger.error(
                "session_cleanup_failed", error=e.cause
            )
            return 0

        if deleted:
            self._logger.info("session_cleanup_completed", deleted=deleted)

        limit = self.config.max_concurrent_sessions
        try:
            over_cap = await self._call(
                "count_users_over_cap", self._store.count_users_over_cap(limit)
            )
        except _StoreUnavailable as e:
            self._logger.warning("session_cap_check_failed", error=e.cause)
            return deleted

        self.users_over_cap = over_cap
        if over_cap:
            self._logger.warning(
                "session_cap_exceeded", users=over_cap, limit=limit
            )
        return deleted

    async def get_user_sessions(
        self, user_id: UUID
    ) -> Result[list[UserSession], SessionError]:
        """List a user's live sessions, most recently used first.

        Returns:
            Success(sessions that are active and not past expiry).
        """
        now = self._now()
        try:
            sessions = await self._call(
                "find_active_by_user", self._store.find_active_by_user(user_id)
            )
        except _StoreUnavailable as e:
            return self._store_failure(e)

        live = [session for session in sessions if session.expires_at > now]
        live.sort(key=lambda s: s.last_accessed_at, reverse=True)
        return Success(value=live)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _call[T](self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            async with asyncio.timeout(self._store_timeout):
                return await awaitable
        except Exception as e:
            raise _StoreUnavailable(operation, e) from e

    def _store_failure(
        self, error: _StoreUnavailable, session_id: str | None = None
    ) -> Failure[SessionError]:
        timed_out = isinstance(error.cause, TimeoutError)
        self._logger.error(
            "session_store_unavailable",
            error=error.cause,
            operation=error.operation,
            timed_out=timed_out,
        )
        return Failure(
            error=SessionError(
                code=ErrorCode.SESSION_STORE_UNAVAILABLE,
                message="Session store is unavailable",
                details={"operation": error.operation, "timed_out": timed_out},
                session_id=session_id,
            )
        )

    async def _expire(
        self,
        session: UserSession,
        now: datetime,
        context: RequestContext | None,
    ) -> None:
        try:
            transitioned = await self._call(
                "invalidate", self._store.invalidate(session.id, now)
            )
        except _StoreUnavailable as e:
            # Still expired; the sweep removes the row later.
            self._logger.warning(
                "session_expire_failed",
                session_id=_short(session.id),
                operation=e.operation,
            )
            return
        if transitioned:
            await self._record(
                session, AuthEventKind.LOGOUT, context, reason=REASON_EXPIRED
            )
            await self._drop_mirror(session.id)
            self._logger.info("session_expired", session_id=_short(session.id))

    def _check_ip(
        self, session: UserSession, context: RequestContext | None
    ) -> SessionError | None:
        policy = self.config.ip_mismatch_policy
        if policy is IpMismatchPolicy.IGNORE:
            return None
        request_ip = context.ip_address if context else None
        if not request_ip or not session.ip_address or request_ip == session.ip_address:
            return None

        self._logger.warning(
            "session_ip_mismatch",
            session_id=_short(session.id),
            user_id=str(session.user_id),
            session_ip=session.ip_address,
            request_ip=request_ip,
            policy=policy.value,
        )
        if policy is IpMismatchPolicy.REJECT:
            return SessionError(
                code=ErrorCode.SESSION_IP_MISMATCH,
                message="Session used from a different IP address",
                session_id=session.id,
            )
        return None

    async def _record(
        self,
        session: UserSession,
        kind: AuthEventKind,
        context: RequestContext | None,
        **detail: Any,
    ) -> None:
        try:
            result = await self._audit.log_auth_event(
                user_id=session.user_id,
                tenant_id=session.tenant_id,
                kind=kind,
                context=context,
                detail={"session_id": session.id, **detail},
            )
        except Exception as e:
            self._logger.warning(
                "audit_record_failed",
                action=kind.action,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return
        if isinstance(result, Failure):
            self._logger.warning(
                "audit_record_failed",
                action=kind.action,
                error_message=result.error.message,
            )

    @property
    def _mirror_enabled(self) -> bool:
        return (
            self.config.mirror_to_cache
            and self._cache is not None
            and self._keys is not None
        )

    async def _mirror(self, session: UserSession) -> None:
        if not self._mirror_enabled or self._cache is None or self._keys is None:
            return
        ttl = max(1, int(session.time_to_expiry(self._now()).total_seconds()))
        try:
            result = await self._cache.set(
                self._keys.user_session(session.id), session.to_dict(), ttl
            )
        except Exception as e:
            self._logger.warning(
                "session_mirror_failed",
                session_id=_short(session.id),
                error_type=type(e).__name__,
            )
            return
        if isinstance(result, Failure):
            self._logger.warning(
                "session_mirror_failed",
                session_id=_short(session.id),
                error_message=result.error.message,
            )

    async def _drop_mirror(self, session_id: str) -> None:
        if not self._mirror_enabled or self._cache is None or self._keys is None:
            return
        try:
            result = await self._cache.delete(self._keys.user_session(session_id))
        except Exception as e:
            self._logger.warning(
                "session_mirror_delete_failed",
                session_id=_short(session_id),
                error_type=type(e).__name__,
            )
            return
        if isinstance(result, Failure):
            self._logger.warning(
                "session_mirror_delete_failed",
                session_id=_short(session_id),
                error_message=result.error.message,
            )
