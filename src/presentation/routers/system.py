"""System router for health and cache diagnostics.

Endpoints:
    GET /health           - Application status plus cache health (public)
    GET /api/cache/stats  - Cache statistics (authenticated)

The health endpoint never fails because the cache is down: the cache is an
optimization, so an unhealthy cache only degrades the reported status.
"""

from fastapi import APIRouter, Depends, Request, status

from src.domain.enums import CacheHealthStatus
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.presentation.api.dependencies import get_cache_store
from src.schemas.cache_schemas import (
    CacheHealthResponse,
    CacheStatsResponse,
    HealthResponse,
)

system_router = APIRouter(tags=["System"])


@system_router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    response_model=HealthResponse,
    summary="Health check",
)
async def health(
    request: Request,
    cache: CacheStoreProtocol = Depends(get_cache_store),
) -> HealthResponse:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        ``healthy`` when the cache is healthy, ``degraded`` otherwise.
    """
    cache_health = await cache.health_check()
    app_status = (
        "healthy" if cache_health.status is CacheHealthStatus.HEALTHY else "degraded"
    )
    return HealthResponse(
        status=app_status,
        version=request.app.version,
        cache=CacheHealthResponse.from_report(cache_health),
    )


@system_router.get(
    "/api/cache/stats",
    status_code=status.HTTP_200_OK,
    response_model=CacheStatsResponse,
    summary="Cache statistics",
)
async def cache_stats(
    cache: CacheStoreProtocol = Depends(get_cache_store),
) -> CacheStatsResponse:
    """Key count, memory, evictions and process-local hit/miss counters."""
    report = await cache.get_stats()
    return CacheStatsResponse.from_report(report)
