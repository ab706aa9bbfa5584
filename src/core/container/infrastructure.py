"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console adapter)
- Cache (Redis client, key registry, cache store)
- Database (async SQLAlchemy)

Each ``get_*`` singleton reads the process settings. The matching
``create_*`` factory takes settings explicitly so the application factory
and tests can build components for any configuration.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from redis.asyncio import ConnectionPool, Redis
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff

from src.core.config import Settings, settings
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.redis_cache_store import RedisCacheStore
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from src.domain.protocols.logger_protocol import LoggerProtocol


# ============================================================================
# Factories
# ============================================================================


def create_logger(config: Settings) -> "LoggerProtocol":
    """Build the structured logger.

    - development: colored console output
    - testing/ci/production: one JSON object per line
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(use_json=not config.is_development, level=config.log_level)


def create_redis_client(config: Settings) -> Redis:
    """Build an async Redis client over a shared connection pool.

    Commands are retried on connection errors and timeouts with exponential
    backoff (50ms base, 500ms cap).
    """
    pool = ConnectionPool.from_url(
        config.redis_url,
        max_connections=config.redis_max_connections,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        socket_keepalive=True,
        retry=Retry(
            ExponentialBackoff(cap=0.5, base=0.05),
            retries=config.redis_max_retries,
        ),
    )
    return Redis(connection_pool=pool)


def create_cache_store(
    config: Settings,
    redis_client: Redis,
    logger: "LoggerProtocol",
    keys: CacheKeys | None = None,
) -> RedisCacheStore:
    """Build the Redis cache store from settings."""
    return RedisCacheStore(
        redis_client,
        logger=logger.bind(component="cache"),
        keys=keys or CacheKeys(prefix=config.cache_key_prefix),
        default_ttl=config.cache_default_ttl_seconds,
        operation_timeout_ms=config.cache_operation_timeout_ms,
        max_memory_bytes=config.cache_max_memory_bytes,
        degraded_latency_ms=config.cache_degraded_latency_ms,
        unhealthy_latency_ms=config.cache_unhealthy_latency_ms,
        degraded_memory_percent=config.cache_degraded_memory_percent,
        unhealthy_memory_percent=config.cache_unhealthy_memory_percent,
    )


def create_database(config: Settings) -> Database:
    return Database(database_url=config.database_url, echo=config.db_echo)


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Usage:
        logger = get_logger()
        logger.info("cache_warmed", tenant_id=str(tenant_id))
    """
    return create_logger(settings)


@lru_cache()
def get_redis_client() -> Redis:
    """Get the Redis client singleton (app-scoped).

    Connection pool is shared across the entire application.
    """
    return create_redis_client(settings)


@lru_cache()
def get_cache_keys() -> CacheKeys:
    """Get the cache key registry for the configured prefix."""
    return CacheKeys(prefix=settings.cache_key_prefix)


@lru_cache()
def get_cache_store() -> RedisCacheStore:
    """Get the cache store singleton (app-scoped).

    Usage:
        # Application Layer (direct use)
        cache = get_cache_store()
        await cache.set(keys.form_category(tenant_id), categories, 3600)
    """
    return create_cache_store(
        settings, get_redis_client(), get_logger(), keys=get_cache_keys()
    )


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Stores open one short transaction per operation via
    ``Database.get_session()``.
    """
    return create_database(settings)
