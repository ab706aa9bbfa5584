"""Unit tests for SessionManager (session lifecycle).

Tests cover:
- create_session(): token shape, expiry, audit, concurrency cap eviction
- validate_session(): not found, expiry, sliding renewal, IP policies,
  concurrent invalidation
- invalidate_session(): idempotency and audit
- cleanup_expired_sessions() and get_user_sessions()
- Users over the concurrency cap reported by the cleanup sweep
- Store failures and timeouts map to SESSION_STORE_UNAVAILABLE
- Audit and cache mirror failures never abort an operation

Architecture:
- InMemorySessionStore (real compare-and-set semantics)
- FakeClock for deterministic time
- AsyncMock audit and cache doubles
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from uuid_extensions import uuid7

from src.application.services.session_config import SessionConfig
from src.application.services.session_manager import (
    REASON_CONCURRENT_LIMIT,
    REASON_EXPIRED,
    REASON_MANUAL_LOGOUT,
    SessionManager,
)
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import AuthEventKind, IpMismatchPolicy
from src.domain.errors import AuditError
from src.domain.value_objects.request_context import RequestContext
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError
from tests.conftest import T0, make_session


def _audit_calls(mock_audit, kind: AuthEventKind) -> list[dict]:
    return [
        call.kwargs
        for call in mock_audit.log_auth_event.call_args_list
        if call.kwargs["kind"] is kind
    ]


async def _create(manager, user_id, tenant_id, context):
    result = await manager.create_session(user_id, tenant_id, context)
    assert isinstance(result, Success)
    return result.value


@pytest.mark.unit
class TestCreateSession:
    """Test SessionManager.create_session()."""

    @pytest.mark.asyncio
    async def test_creates_active_session(
        self, session_manager, memory_store, request_context
    ):
        user_id, tenant_id = uuid7(), uuid7()

        result = await session_manager.create_session(
            user_id, tenant_id, request_context, metadata={"login_method": "password"}
        )

        assert isinstance(result, Success)
        session = result.value
        assert session.user_id == user_id
        assert session.tenant_id == tenant_id
        assert session.is_active is True
        assert session.created_at == T0
        assert session.last_accessed_at == T0
        assert session.expires_at == T0 + timedelta(seconds=3600)
        assert session.ip_address == "10.0.0.1"
        assert session.user_agent == "pytest-agent"
        assert session.metadata == {"login_method": "password"}
        assert await memory_store.find_active_by_id(session.id) == session

    @pytest.mark.asyncio
    async def test_session_ids_are_long_and_unique(
        self, session_manager, request_context
    ):
        user_id, tenant_id = uuid7(), uuid7()

        first = await _create(session_manager, user_id, tenant_id, request_context)
        second = await _create(session_manager, user_id, tenant_id, request_context)

        assert first.id != second.id
        assert len(first.id) >= 43

    @pytest.mark.asyncio
    async def test_records_login_audit_event(
        self, session_manager, mock_audit, request_context
    ):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)

        mock_audit.log_auth_event.assert_awaited_once()
        event = mock_audit.log_auth_event.call_args.kwargs
        assert event["kind"] is AuthEventKind.LOGIN
        assert event["user_id"] == session.user_id
        assert event["tenant_id"] == session.tenant_id
        assert event["context"] is request_context
        assert event["detail"]["session_id"] == session.id
        assert event["detail"]["expires_at"] == session.expires_at.isoformat()


@pytest.mark.unit
class TestConcurrentSessionLimit:
    """Test the per-user active session cap."""

    @pytest.mark.asyncio
    async def test_fourth_login_evicts_oldest(
        self, session_manager, memory_store, clock, request_context
    ):
        """Test cap 3 with S1..S4 leaves [S4, S3, S2] active."""
        user_id, tenant_id = uuid7(), uuid7()
        created = []
        for _ in range(4):
            created.append(
                await _create(session_manager, user_id, tenant_id, request_context)
            )
            clock.advance(minutes=1)
        s1, s2, s3, s4 = created

        result = await session_manager.get_user_sessions(user_id)

        assert isinstance(result, Success)
        assert [s.id for s in result.value] == [s4.id, s3.id, s2.id]
        assert await memory_store.find_active_by_id(s1.id) is None

    @pytest.mark.asyncio
    async def test_eviction_is_audited_as_logout(
        self, session_manager, mock_audit, clock, request_context
    ):
        user_id, tenant_id = uuid7(), uuid7()
        first = await _create(session_manager, user_id, tenant_id, request_context)
        for _ in range(3):
            clock.advance(minutes=1)
            await _create(session_manager, user_id, tenant_id, request_context)

        logouts = _audit_calls(mock_audit, AuthEventKind.LOGOUT)

        assert len(logouts) == 1
        assert logouts[0]["detail"] == {
            "session_id": first.id,
            "reason": REASON_CONCURRENT_LIMIT,
        }

    @pytest.mark.asyncio
    async def test_cap_of_one_keeps_only_newest(
        self, memory_store, mock_audit, mock_logger, clock, request_context
    ):
        manager = SessionManager(
            store=memory_store,
            audit=mock_audit,
            logger=mock_logger,
            config=SessionConfig(max_concurrent_sessions=1),
            clock=clock,
        )
        user_id, tenant_id = uuid7(), uuid7()

        old = await _create(manager, user_id, tenant_id, request_context)
        clock.advance(seconds=1)
        new = await _create(manager, user_id, tenant_id, request_context)

        active = await memory_store.find_active_by_user(user_id)
        assert [s.id for s in active] == [new.id]
        assert await memory_store.find_active_by_id(old.id) is None

    @pytest.mark.asyncio
    async def test_cap_is_per_user(self, session_manager, clock, request_context):
        tenant_id = uuid7()
        alice, bob = uuid7(), uuid7()
        for _ in range(3):
            await _create(session_manager, alice, tenant_id, request_context)
            await _create(session_manager, bob, tenant_id, request_context)
            clock.advance(seconds=1)

        alice_sessions = await session_manager.get_user_sessions(alice)
        bob_sessions = await session_manager.get_user_sessions(bob)

        assert len(alice_sessions.value) == 3
        assert len(bob_sessions.value) == 3


@pytest.mark.unit
class TestValidateSession:
    """Test SessionManager.validate_session()."""

    @pytest.mark.asyncio
    async def test_unknown_session_not_found(self, session_manager):
        result = await session_manager.validate_session("does-not-exist")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_NOT_FOUND
        assert result.error.session_id == "does-not-exist"
        assert result.error.is_unavailable is False

    @pytest.mark.asyncio
    async def test_immediate_validation_keeps_expiry(
        self, session_manager, clock, request_context
    ):
        """Test a fresh session is not renewed (3600s left, threshold 1800s)."""
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        clock.advance(seconds=10)

        result = await session_manager.validate_session(session.id, request_context)

        assert isinstance(result, Success)
        assert result.value.expires_at == T0 + timedelta(seconds=3600)
        assert result.value.last_accessed_at == T0 + timedelta(seconds=10)

    @pytest.mark.asyncio
    async def test_renews_when_below_threshold(
        self, session_manager, memory_store, clock, request_context
    ):
        """Test validation at T0+3500s slides expiry to T0+3500s+3600s."""
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        clock.advance(seconds=3500)

        result = await session_manager.validate_session(session.id, request_context)

        expected = T0 + timedelta(seconds=3500 + 3600)
        assert isinstance(result, Success)
        assert result.value.expires_at == expected
        stored = await memory_store.find_active_by_id(session.id)
        assert stored.expires_at == expected
        assert stored.last_accessed_at == T0 + timedelta(seconds=3500)

    @pytest.mark.asyncio
    async def test_expiry_never_moves_backwards(
        self, session_manager, clock, request_context
    ):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        previous = session.expires_at

        for step in (600, 1500, 1900, 300, 3000, 100):
            clock.advance(seconds=step)
            result = await session_manager.validate_session(
                session.id, request_context
            )
            assert isinstance(result, Success)
            assert result.value.expires_at >= previous
            previous = result.value.expires_at

    @pytest.mark.asyncio
    async def test_expired_session_is_invalidated(
        self, session_manager, memory_store, mock_audit, clock, request_context
    ):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        clock.advance(seconds=3601)

        result = await session_manager.validate_session(session.id, request_context)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_EXPIRED
        assert await memory_store.find_active_by_id(session.id) is None
        logouts = _audit_calls(mock_audit, AuthEventKind.LOGOUT)
        assert logouts[0]["detail"] == {
            "session_id": session.id,
            "reason": REASON_EXPIRED,
        }

    @pytest.mark.asyncio
    async def test_expired_session_stays_rejected(
        self, session_manager, clock, request_context
    ):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        clock.advance(seconds=3601)
        await session_manager.validate_session(session.id, request_context)

        result = await session_manager.validate_session(session.id, request_context)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_NOT_FOUND

    @pytest.mark.asyncio
    async def test_validation_without_context(self, session_manager, request_context):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)

        result = await session_manager.validate_session(session.id)

        assert isinstance(result, Success)

    @pytest.mark.asyncio
    async def test_concurrent_invalidate_and_validate(
        self, session_manager, memory_store, request_context
    ):
        """Test a logout racing a validation leaves the session dead."""
        session = await _create(session_manager, uuid7(), uuid7(), request_context)

        await asyncio.gather(
            session_manager.invalidate_session(session.id),
            session_manager.validate_session(session.id, request_context),
        )

        assert await memory_store.find_active_by_id(session.id) is None
        later = await session_manager.validate_session(session.id, request_context)
        assert isinstance(later, Failure)

    @pytest.mark.asyncio
    async def test_update_losing_race_reports_invalidated(
        self, session_manager, memory_store, request_context
    ):
        """Test the conditional update detects a logout after the read."""
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        original_update = memory_store.update_access_and_expiry

        async def logout_then_update(session_id, last_accessed_at, expires_at):
            await memory_store.invalidate(session_id, last_accessed_at)
            return await original_update(session_id, last_accessed_at, expires_at)

        memory_store.update_access_and_expiry = logout_then_update

        result = await session_manager.validate_session(session.id, request_context)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_INVALIDATED


@pytest.mark.unit
class TestIpMismatchPolicy:
    """Test IP binding policies."""

    def _manager(self, store, audit, logger, clock, policy):
        return SessionManager(
            store=store,
            audit=audit,
            logger=logger,
            config=SessionConfig(ip_mismatch_policy=policy),
            clock=clock,
        )

    @pytest.mark.asyncio
    async def test_ignore_policy_accepts_new_ip(
        self, memory_store, mock_audit, mock_logger, clock, request_context
    ):
        manager = self._manager(
            memory_store, mock_audit, mock_logger, clock, IpMismatchPolicy.IGNORE
        )
        session = await _create(manager, uuid7(), uuid7(), request_context)

        result = await manager.validate_session(
            session.id, RequestContext(ip_address="192.168.1.9")
        )

        assert isinstance(result, Success)
        warned = [c.args[0] for c in mock_logger.warning.call_args_list]
        assert "session_ip_mismatch" not in warned

    @pytest.mark.asyncio
    async def test_warn_policy_logs_and_accepts(
        self, memory_store, mock_audit, mock_logger, clock, request_context
    ):
        manager = self._manager(
            memory_store, mock_audit, mock_logger, clock, IpMismatchPolicy.WARN
        )
        session = await _create(manager, uuid7(), uuid7(), request_context)

        result = await manager.validate_session(
            session.id, RequestContext(ip_address="192.168.1.9")
        )

        assert isinstance(result, Success)
        warning = next(
            c for c in mock_logger.warning.call_args_list
            if c.args[0] == "session_ip_mismatch"
        )
        assert warning.kwargs["session_ip"] == "10.0.0.1"
        assert warning.kwargs["request_ip"] == "192.168.1.9"

    @pytest.mark.asyncio
    async def test_reject_policy_fails_but_keeps_session(
        self, memory_store, mock_audit, mock_logger, clock, request_context
    ):
        manager = self._manager(
            memory_store, mock_audit, mock_logger, clock, IpMismatchPolicy.REJECT
        )
        session = await _create(manager, uuid7(), uuid7(), request_context)

        result = await manager.validate_session(
            session.id, RequestContext(ip_address="192.168.1.9")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_IP_MISMATCH
        assert await memory_store.find_active_by_id(session.id) is not None
        same_ip = await manager.validate_session(session.id, request_context)
        assert isinstance(same_ip, Success)

    @pytest.mark.asyncio
    async def test_reject_policy_skips_unknown_ip(
        self, memory_store, mock_audit, mock_logger, clock, request_context
    ):
        manager = self._manager(
            memory_store, mock_audit, mock_logger, clock, IpMismatchPolicy.REJECT
        )
        session = await _create(manager, uuid7(), uuid7(), request_context)

        result = await manager.validate_session(session.id, RequestContext())

        assert isinstance(result, Success)


@pytest.mark.unit
class TestInvalidateSession:
    """Test SessionManager.invalidate_session()."""

    @pytest.mark.asyncio
    async def test_invalidate_is_idempotent(
        self, session_manager, memory_store, clock, request_context
    ):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        clock.advance(seconds=30)

        first = await session_manager.invalidate_session(session.id)
        second = await session_manager.invalidate_session(session.id)

        assert first == Success(value=True)
        assert second == Success(value=False)
        assert await memory_store.find_active_by_id(session.id) is None

    @pytest.mark.asyncio
    async def test_invalidated_session_no_longer_validates(
        self, session_manager, request_context
    ):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        await session_manager.invalidate_session(session.id)

        result = await session_manager.validate_session(session.id, request_context)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_NOT_FOUND

    @pytest.mark.asyncio
    async def test_unknown_session_returns_false(self, session_manager):
        assert await session_manager.invalidate_session("nope") == Success(value=False)

    @pytest.mark.asyncio
    async def test_records_logout_once(
        self, session_manager, mock_audit, request_context
    ):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)

        await session_manager.invalidate_session(
            session.id, REASON_MANUAL_LOGOUT, request_context
        )
        await session_manager.invalidate_session(session.id)

        logouts = _audit_calls(mock_audit, AuthEventKind.LOGOUT)
        assert len(logouts) == 1
        assert logouts[0]["detail"]["reason"] == REASON_MANUAL_LOGOUT
        assert logouts[0]["context"] is request_context


@pytest.mark.unit
class TestCleanupAndListing:
    """Test cleanup_expired_sessions() and get_user_sessions()."""

    @pytest.mark.asyncio
    async def test_cleanup_removes_expired_rows_only(
        self, session_manager, memory_store, clock
    ):
        """Test an expired-but-active row is removed and a live row kept."""
        expired = make_session(session_id="expired", lifetime=timedelta(hours=1))
        live = make_session(session_id="live", lifetime=timedelta(hours=8))
        await memory_store.insert(expired)
        await memory_store.insert(live)
        clock.advance(hours=2)

        deleted = await session_manager.cleanup_expired_sessions()

        assert deleted == 1
        assert await memory_store.find_active_by_id("live") is not None
        assert len(memory_store) == 1

    @pytest.mark.asyncio
    async def test_cleanup_removes_inactive_rows(self, session_manager, memory_store):
        await memory_store.insert(make_session(session_id="gone", is_active=False))

        assert await session_manager.cleanup_expired_sessions() == 1
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_cleanup_reports_users_over_cap(
        self, session_manager, memory_store, mock_logger
    ):
        """Test four active rows for one user with cap 3 are reported."""
        user_id = uuid7()
        for index in range(4):
            await memory_store.insert(
                make_session(session_id=f"s{index}", user_id=user_id)
            )
        await memory_store.insert(make_session(session_id="other"))

        assert await session_manager.cleanup_expired_sessions() == 0

        assert session_manager.users_over_cap == 1
        assert len(memory_store) == 5
        mock_logger.warning.assert_called_once_with(
            "session_cap_exceeded", users=1, limit=3
        )

    @pytest.mark.asyncio
    async def test_cleanup_at_cap_reports_nothing(
        self, session_manager, memory_store, mock_logger
    ):
        user_id = uuid7()
        for index in range(3):
            await memory_store.insert(
                make_session(session_id=f"s{index}", user_id=user_id)
            )
        await memory_store.insert(
            make_session(session_id="old", user_id=user_id, is_active=False)
        )

        assert await session_manager.cleanup_expired_sessions() == 1

        assert session_manager.users_over_cap == 0
        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_listing_skips_expired_sessions(
        self, session_manager, clock, request_context
    ):
        user_id, tenant_id = uuid7(), uuid7()
        await _create(session_manager, user_id, tenant_id, request_context)
        clock.advance(seconds=3000)
        newer = await _create(session_manager, user_id, tenant_id, request_context)
        clock.advance(seconds=700)

        result = await session_manager.get_user_sessions(user_id)

        assert [s.id for s in result.value] == [newer.id]

    @pytest.mark.asyncio
    async def test_listing_orders_by_last_access(
        self, session_manager, clock, request_context
    ):
        user_id, tenant_id = uuid7(), uuid7()
        older = await _create(session_manager, user_id, tenant_id, request_context)
        clock.advance(seconds=10)
        newer = await _create(session_manager, user_id, tenant_id, request_context)
        clock.advance(seconds=10)
        await session_manager.validate_session(older.id, request_context)

        result = await session_manager.get_user_sessions(user_id)

        assert [s.id for s in result.value] == [older.id, newer.id]

    @pytest.mark.asyncio
    async def test_listing_unknown_user_is_empty(self, session_manager):
        assert await session_manager.get_user_sessions(uuid7()) == Success(value=[])


@pytest.mark.unit
class TestStoreFailures:
    """Test store errors and timeouts."""

    @pytest.mark.asyncio
    async def test_store_error_on_validate(self, mock_audit, mock_logger):
        store = AsyncMock()
        store.find_active_by_id.side_effect = OSError("connection refused")
        manager = SessionManager(store=store, audit=mock_audit, logger=mock_logger)

        result = await manager.validate_session("abc")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_STORE_UNAVAILABLE
        assert result.error.is_unavailable is True
        assert result.error.details == {
            "operation": "find_active_by_id",
            "timed_out": False,
        }
        mock_logger.error.assert_called()

    @pytest.mark.asyncio
    async def test_store_timeout_on_validate(
        self, memory_store, mock_audit, mock_logger, request_context
    ):
        manager = SessionManager(
            store=memory_store,
            audit=mock_audit,
            logger=mock_logger,
            config=SessionConfig(store_timeout=timedelta(milliseconds=20)),
        )

        async def hang(session_id):
            await asyncio.sleep(1)

        memory_store.find_active_by_id = hang

        result = await manager.validate_session("abc", request_context)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_STORE_UNAVAILABLE
        assert result.error.details["timed_out"] is True

    @pytest.mark.asyncio
    async def test_store_error_on_create(
        self, mock_audit, mock_logger, request_context
    ):
        store = AsyncMock()
        store.find_active_by_user.return_value = []
        store.insert.side_effect = RuntimeError("disk full")
        manager = SessionManager(store=store, audit=mock_audit, logger=mock_logger)

        result = await manager.create_session(uuid7(), uuid7(), request_context)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_STORE_UNAVAILABLE
        mock_audit.log_auth_event.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_error_on_invalidate_and_listing(
        self, mock_audit, mock_logger
    ):
        store = AsyncMock()
        store.find_active_by_id.side_effect = OSError("down")
        store.find_active_by_user.side_effect = OSError("down")
        manager = SessionManager(store=store, audit=mock_audit, logger=mock_logger)

        invalidated = await manager.invalidate_session("abc")
        listed = await manager.get_user_sessions(uuid7())

        assert invalidated.error.code == ErrorCode.SESSION_STORE_UNAVAILABLE
        assert listed.error.code == ErrorCode.SESSION_STORE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_cleanup_failure_returns_zero(self, mock_audit, mock_logger):
        store = AsyncMock()
        store.delete_expired_or_inactive.side_effect = OSError("down")
        manager = SessionManager(store=store, audit=mock_audit, logger=mock_logger)

        assert await manager.cleanup_expired_sessions() == 0
        mock_logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_cap_check_failure_keeps_deleted_count(
        self, mock_audit, mock_logger
    ):
        store = AsyncMock()
        store.delete_expired_or_inactive.return_value = 2
        store.count_users_over_cap.side_effect = OSError("down")
        manager = SessionManager(store=store, audit=mock_audit, logger=mock_logger)

        assert await manager.cleanup_expired_sessions() == 2
        assert manager.users_over_cap == 0
        assert mock_logger.warning.call_args.args == ("session_cap_check_failed",)

    @pytest.mark.asyncio
    async def test_insert_failure_after_eviction_still_audits_logouts(
        self, mock_audit, mock_logger, request_context
    ):
        """Test evicted sessions get their logout event when the insert fails."""
        user_id = uuid7()
        active = [
            make_session(session_id=f"s{index}", user_id=user_id)
            for index in range(3)
        ]
        store = AsyncMock()
        store.find_active_by_user.return_value = active
        store.bulk_invalidate.return_value = 1
        store.insert.side_effect = RuntimeError("disk full")
        manager = SessionManager(
            store=store,
            audit=mock_audit,
            logger=mock_logger,
            config=SessionConfig(max_concurrent_sessions=3),
        )

        result = await manager.create_session(user_id, uuid7(), request_context)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SESSION_STORE_UNAVAILABLE
        assert result.error.details["operation"] == "insert"
        store.bulk_invalidate.assert_awaited_once()
        assert store.bulk_invalidate.call_args.args[0] == ["s2"]
        logouts = _audit_calls(mock_audit, AuthEventKind.LOGOUT)
        assert [event["detail"] for event in logouts] == [
            {"session_id": "s2", "reason": REASON_CONCURRENT_LIMIT}
        ]
        assert _audit_calls(mock_audit, AuthEventKind.LOGIN) == []


@pytest.mark.unit
class TestAuditFailures:
    """Test audit failures never abort session operations."""

    @pytest.mark.asyncio
    async def test_audit_exception_does_not_abort_create(
        self, session_manager, mock_audit, mock_logger, request_context
    ):
        mock_audit.log_auth_event.side_effect = RuntimeError("audit down")

        result = await session_manager.create_session(
            uuid7(), uuid7(), request_context
        )

        assert isinstance(result, Success)
        mock_logger.warning.assert_any_call(
            "audit_record_failed",
            action="auth_login",
            error_type="RuntimeError",
            error_message="audit down",
        )

    @pytest.mark.asyncio
    async def test_audit_failure_result_does_not_abort_logout(
        self, session_manager, mock_audit, mock_logger, request_context
    ):
        session = await _create(session_manager, uuid7(), uuid7(), request_context)
        mock_audit.log_auth_event.return_value = Failure(
            error=AuditError(
                code=ErrorCode.AUDIT_RECORD_FAILED, message="insert failed"
            )
        )

        result = await session_manager.invalidate_session(session.id)

        assert result == Success(value=True)
        mock_logger.warning.assert_any_call(
            "audit_record_failed", action="auth_logout", error_message="insert failed"
        )


@pytest.mark.unit
class TestCacheMirror:
    """Test the optional session:{id} cache mirror."""

    @pytest.fixture
    def mirror_cache(self) -> AsyncMock:
        cache = AsyncMock()
        cache.set.return_value = Success(value=None)
        cache.delete.return_value = Success(value=True)
        return cache

    @pytest.fixture
    def mirrored_manager(
        self, memory_store, mock_audit, mock_logger, clock, mirror_cache
    ) -> SessionManager:
        return SessionManager(
            store=memory_store,
            audit=mock_audit,
            logger=mock_logger,
            config=SessionConfig(
                max_age=timedelta(seconds=3600),
                renewal_threshold=timedelta(seconds=1800),
                mirror_to_cache=True,
            ),
            cache=mirror_cache,
            keys=CacheKeys(),
            clock=clock,
        )

    @pytest.mark.asyncio
    async def test_create_writes_mirror(
        self, mirrored_manager, mirror_cache, request_context
    ):
        session = await _create(mirrored_manager, uuid7(), uuid7(), request_context)

        mirror_cache.set.assert_awaited_once_with(
            f"chc_insight:session:{session.id}", session.to_dict(), 3600
        )

    @pytest.mark.asyncio
    async def test_invalidate_drops_mirror(
        self, mirrored_manager, mirror_cache, request_context
    ):
        session = await _create(mirrored_manager, uuid7(), uuid7(), request_context)

        await mirrored_manager.invalidate_session(session.id)

        mirror_cache.delete.assert_awaited_once_with(
            f"chc_insight:session:{session.id}"
        )

    @pytest.mark.asyncio
    async def test_mirror_failure_does_not_abort(
        self, mirrored_manager, mirror_cache, request_context
    ):
        mirror_cache.set.return_value = Failure(
            error=CacheError(
                code=ErrorCode.CACHE_UNAVAILABLE,
                infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                message="Cache set failed",
            )
        )

        result = await mirrored_manager.create_session(
            uuid7(), uuid7(), request_context
        )

        assert isinstance(result, Success)

    @pytest.mark.asyncio
    async def test_mirror_disabled_by_default(
        self, memory_store, mock_audit, mock_logger, mirror_cache, request_context
    ):
        manager = SessionManager(
            store=memory_store,
            audit=mock_audit,
            logger=mock_logger,
            cache=mirror_cache,
            keys=CacheKeys(),
        )

        await _create(manager, uuid7(), uuid7(), request_context)

        mirror_cache.set.assert_not_awaited()
