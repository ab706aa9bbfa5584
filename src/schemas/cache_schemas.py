"""Cache and health response schemas.

Endpoints:
    GET /health           - Application status with cache health
    GET /api/cache/stats  - Cache statistics report
"""

from pydantic import BaseModel, Field

from src.domain.enums import CacheHealthStatus
from src.domain.value_objects.cache_reports import CacheHealth, CacheStatsReport


class CacheHealthResponse(BaseModel):
    """Cache health snapshot."""

    connected: bool = Field(..., description="PING succeeded")
    latency_ms: float = Field(..., description="PING round trip in milliseconds")
    memory_usage_percent: float = Field(
        ..., description="used_memory as a percentage of the memory budget"
    )
    status: CacheHealthStatus = Field(..., description="healthy, degraded or unhealthy")

    @classmethod
    def from_report(cls, health: CacheHealth) -> "CacheHealthResponse":
        return cls(**health.to_dict())


class HealthResponse(BaseModel):
    """Response schema for GET /health."""

    status: str = Field(..., description="Overall application status")
    version: str = Field(..., description="Application version")
    cache: CacheHealthResponse


class CacheStatsResponse(BaseModel):
    """Response schema for GET /api/cache/stats."""

    total_keys: int
    memory_usage: int = Field(..., description="used_memory in bytes")
    hit_rate: float = Field(..., description="Fraction of reads that hit (0.0 to 1.0)")
    miss_rate: float = Field(..., description="Fraction of reads that missed (0.0 to 1.0)")
    evictions: int
    hits: int
    misses: int
    sets: int
    deletes: int
    namespaces: dict[str, dict[str, float]] = Field(
        default_factory=dict, description="Per-namespace operation counters"
    )

    @classmethod
    def from_report(cls, report: CacheStatsReport) -> "CacheStatsResponse":
        return cls(**report.to_dict())
