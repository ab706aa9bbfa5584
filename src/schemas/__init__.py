"""Request/response schemas for API endpoints.

Pydantic models for HTTP response serialization, kept separate from domain
entities (HTTP-layer concerns only).

Usage:
    from src.schemas import SessionListResponse, HealthResponse
"""

from src.schemas.cache_schemas import (
    CacheHealthResponse,
    CacheStatsResponse,
    HealthResponse,
)
from src.schemas.session_schemas import SessionListResponse, SessionResponse

__all__ = [
    # Cache / health
    "CacheHealthResponse",
    "CacheStatsResponse",
    "HealthResponse",
    # Sessions
    "SessionListResponse",
    "SessionResponse",
]
