"""FastAPI dependencies resolving lifespan-owned components.

Components are built once in the application lifespan and stored on
``app.state``; routes receive them through ``Depends`` so tests can swap
them with ``app.dependency_overrides``.
"""

from fastapi import HTTPException, Request, status

from src.application.services.session_manager import SessionManager
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol


def get_session_manager(request: Request) -> SessionManager:
    """Session manager of the running application."""
    manager: SessionManager | None = getattr(
        request.app.state, "session_manager", None
    )
    if manager is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session manager not initialized",
        )
    return manager


def get_cache_store(request: Request) -> CacheStoreProtocol:
    """Cache store of the running application."""
    cache: CacheStoreProtocol | None = getattr(request.app.state, "cache_store", None)
    if cache is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cache store not initialized",
        )
    return cache
