"""
Main FastAPI application entry point.

``create_app`` builds the application: session and cache components are
constructed in the lifespan (or injected, for tests) and kept on
``app.state``; the periodic session sweep runs as a lifespan-owned task.

Middleware order (outermost first):
    TraceMiddleware   - trace_id for every request and log line
    SessionMiddleware - session authentication for non-public paths
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.application.services.session_manager import SessionManager
from src.core.config import Settings, get_settings
from src.core.container import (
    create_audit,
    create_cache_store,
    create_cleanup_job,
    create_database,
    create_domain_cache,
    create_logger,
    create_redis_client,
    create_session_manager,
    create_session_store,
)
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.redis_cache_store import RedisCacheStore
from src.infrastructure.jobs import SessionCleanupJob
from src.infrastructure.persistence.database import Database
from src.presentation.api.middleware.session_middleware import SessionMiddleware
from src.presentation.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers import sessions_router, system_router


def create_app(
    settings: Settings | None = None,
    *,
    session_manager: SessionManager | None = None,
    cache_store: CacheStoreProtocol | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application settings (process settings when omitted).
        session_manager: Pre-built session manager; built from settings
            when omitted.
        cache_store: Pre-built cache store; a Redis cache store is built
            from settings when omitted.

    Returns:
        Configured FastAPI application.
    """
    config = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Build components on startup, release them on shutdown."""
        logger = create_logger(config)
        keys = CacheKeys(prefix=config.cache_key_prefix)

        owned_cache: RedisCacheStore | None = None
        cache = cache_store
        if cache is None:
            owned_cache = create_cache_store(
                config, create_redis_client(config), logger, keys=keys
            )
            cache = owned_cache

        database: Database | None = None
        manager = session_manager
        if manager is None:
            if "database" in (config.session_store_backend, config.audit_backend):
                database = create_database(config)
            manager = create_session_manager(
                config,
                store=create_session_store(config, database),
                audit=create_audit(config, logger, database),
                logger=logger,
                cache=cache,
                keys=keys,
            )

        app.state.session_manager = manager
        app.state.cache_store = cache
        app.state.domain_cache = create_domain_cache(cache, keys, logger)

        cleanup_job: SessionCleanupJob | None = None
        if config.session_cleanup_enabled:
            cleanup_job = create_cleanup_job(config, manager, logger)
            await cleanup_job.start()
        app.state.cleanup_job = cleanup_job

        logger.info(
            "application_started",
            environment=config.environment.value,
            session_store=config.session_store_backend,
            audit=config.audit_backend,
        )
        try:
            yield
        finally:
            if cleanup_job is not None:
                await cleanup_job.stop()
            if owned_cache is not None:
                await owned_cache.close()
            if database is not None:
                await database.close()
            logger.info("application_stopped")

    app = FastAPI(
        title=config.app_name,
        description="Session and cache core for the CHC Insight platform",
        version=config.app_version,
        debug=config.debug,
        lifespan=lifespan,
    )
    app.state.settings = config

    # Added first so TraceMiddleware wraps it and trace_id is bound during
    # session validation.
    app.add_middleware(
        SessionMiddleware,
        public_paths=list(config.session_public_paths),
        cookie_name=config.session_cookie_name,
        trust_forwarded_ip=config.trust_forwarded_ip,
    )
    app.add_middleware(TraceMiddleware)

    app.include_router(system_router)
    app.include_router(sessions_router)
    return app


app = create_app()
