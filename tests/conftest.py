"""Pytest configuration and shared fixtures.

This configuration ensures:
1. Every test gets fresh backends (no shared Redis or database state)
2. Session tests control time through an injectable clock
3. Cache fixtures bypass the container singletons for isolation

Backends:
- fakeredis stands in for Redis (one FakeServer per test)
- SQLite via aiosqlite stands in for PostgreSQL
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
import pytest
import pytest_asyncio
from uuid_extensions import uuid7

from src.application.services.session_config import SessionConfig
from src.application.services.session_manager import SessionManager
from src.core.result import Success
from src.domain.entities.user_session import UserSession
from src.domain.value_objects.request_context import RequestContext
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.redis_cache_store import RedisCacheStore
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.stores import InMemorySessionStore

T0 = datetime(2026, 1, 12, 9, 0, tzinfo=UTC)


class FakeClock:
    """Deterministic clock for SessionManager.

    Usage:
        clock = FakeClock()
        manager = SessionManager(..., clock=clock)
        clock.advance(seconds=3500)
    """

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now


def make_session(
    *,
    session_id: str = "session-token-0001",
    user_id: UUID | None = None,
    tenant_id: UUID | None = None,
    created_at: datetime = T0,
    lifetime: timedelta = timedelta(hours=8),
    ip_address: str | None = "10.0.0.1",
    is_active: bool = True,
) -> UserSession:
    """Helper to build a UserSession for store and schema tests."""
    return UserSession(
        id=session_id,
        user_id=user_id or uuid7(),
        tenant_id=tenant_id or uuid7(),
        created_at=created_at,
        last_accessed_at=created_at,
        expires_at=created_at + lifetime,
        ip_address=ip_address,
        user_agent="pytest-agent",
        is_active=is_active,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double; ``bind`` returns the same mock so assertions stay simple."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def mock_audit() -> AsyncMock:
    audit = AsyncMock()
    audit.log_auth_event.return_value = Success(value=None)
    return audit


@pytest.fixture
def memory_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def request_context() -> RequestContext:
    return RequestContext(
        ip_address="10.0.0.1",
        user_agent="pytest-agent",
        path="/api/auth/login",
        method="POST",
        trace_id="trace-123",
    )


@pytest.fixture
def session_config() -> SessionConfig:
    """Short lifetimes matching the renewal scenarios (1h, renew under 30min)."""
    return SessionConfig(
        max_age=timedelta(seconds=3600),
        renewal_threshold=timedelta(seconds=1800),
        max_concurrent_sessions=3,
    )


@pytest.fixture
def session_manager(
    memory_store, mock_audit, mock_logger, session_config, clock
) -> SessionManager:
    return SessionManager(
        store=memory_store,
        audit=mock_audit,
        logger=mock_logger,
        config=session_config,
        clock=clock,
    )


@pytest.fixture
def cache_keys() -> CacheKeys:
    return CacheKeys(prefix="chc_insight")


@pytest_asyncio.fixture
async def redis_client() -> AsyncGenerator[FakeRedis, None]:
    """Fresh in-process Redis per test."""
    client = FakeRedis(server=FakeServer(), decode_responses=False)
    yield client
    await client.aclose()


@pytest.fixture
def cache_store(redis_client, mock_logger, cache_keys) -> RedisCacheStore:
    """Cache store over fakeredis (bypasses the container singleton)."""
    return RedisCacheStore(
        redis_client,
        logger=mock_logger,
        keys=cache_keys,
        default_ttl=3600,
        operation_timeout_ms=1000,
    )


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """File-backed SQLite database with all tables created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'sessions.db'}")
    await db.create_all()
    yield db
    await db.close()
