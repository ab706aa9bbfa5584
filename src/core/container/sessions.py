"""Session component factories.

Plain (uncached) factories: the application lifespan builds one set of
session components per app instance and keeps them on ``app.state``.

Backends are selected by settings:
    SESSION_STORE_BACKEND: database | memory
    AUDIT_BACKEND:         logger | database
"""

from datetime import timedelta

from src.application.services.session_config import SessionConfig
from src.application.services.session_manager import SessionManager
from src.core.config import Settings
from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.session_store_protocol import SessionStoreProtocol
from src.infrastructure.audit import DatabaseAuditAdapter, LoggerAuditAdapter
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.domain_cache import DomainCache
from src.infrastructure.jobs import SessionCleanupJob
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.stores import (
    InMemorySessionStore,
    SQLAlchemySessionStore,
)


def create_session_store(
    config: Settings, database: Database | None = None
) -> SessionStoreProtocol:
    """Session store for ``SESSION_STORE_BACKEND``.

    Raises:
        ValueError: If the database backend is selected without a database.
    """
    match config.session_store_backend:
        case "memory":
            return InMemorySessionStore()
        case "database":
            if database is None:
                raise ValueError("database session store requires a Database")
            return SQLAlchemySessionStore(database)
        case backend:
            raise ValueError(f"Unsupported SESSION_STORE_BACKEND: {backend}")


def create_audit(
    config: Settings,
    logger: LoggerProtocol,
    database: Database | None = None,
) -> AuditProtocol:
    """Audit adapter for ``AUDIT_BACKEND``.

    Raises:
        ValueError: If the database backend is selected without a database.
    """
    match config.audit_backend:
        case "logger":
            return LoggerAuditAdapter(logger)
        case "database":
            if database is None:
                raise ValueError("database audit backend requires a Database")
            return DatabaseAuditAdapter(database)
        case backend:
            raise ValueError(f"Unsupported AUDIT_BACKEND: {backend}")


def create_session_manager(
    config: Settings,
    *,
    store: SessionStoreProtocol,
    audit: AuditProtocol,
    logger: LoggerProtocol,
    cache: CacheStoreProtocol | None = None,
    keys: CacheKeys | None = None,
) -> SessionManager:
    """Session manager configured from settings."""
    return SessionManager(
        store=store,
        audit=audit,
        logger=logger,
        config=SessionConfig.from_settings(config),
        cache=cache,
        keys=keys,
    )


def create_domain_cache(
    cache: CacheStoreProtocol, keys: CacheKeys, logger: LoggerProtocol
) -> DomainCache:
    return DomainCache(cache, keys, logger)


def create_cleanup_job(
    config: Settings, manager: SessionManager, logger: LoggerProtocol
) -> SessionCleanupJob:
    """Background sweep calling ``manager.cleanup_expired_sessions``."""
    return SessionCleanupJob(
        cleanup=manager.cleanup_expired_sessions,
        interval=timedelta(seconds=config.session_cleanup_interval_seconds),
        logger=logger,
        users_over_cap=lambda: manager.users_over_cap,
    )
