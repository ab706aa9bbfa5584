"""Container module - Centralized dependency injection.

Re-exports all factory functions from submodules:

    from src.core.container import get_cache_store, create_session_manager

The container is organized into modules by concern:
- infrastructure: logging, Redis, cache store, database (app-scoped singletons)
- sessions: session store, audit, session manager, domain cache, cleanup job
"""

# Infrastructure services
from src.core.container.infrastructure import (
    create_cache_store,
    create_database,
    create_logger,
    create_redis_client,
    get_cache_keys,
    get_cache_store,
    get_database,
    get_logger,
    get_redis_client,
)

# Session components
from src.core.container.sessions import (
    create_audit,
    create_cleanup_job,
    create_domain_cache,
    create_session_manager,
    create_session_store,
)

__all__ = [
    # Infrastructure
    "create_cache_store",
    "create_database",
    "create_logger",
    "create_redis_client",
    "get_cache_keys",
    "get_cache_store",
    "get_database",
    "get_logger",
    "get_redis_client",
    # Sessions
    "create_audit",
    "create_cleanup_job",
    "create_domain_cache",
    "create_session_manager",
    "create_session_store",
]
