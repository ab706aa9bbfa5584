"""Cache statistics and health value objects.

Returned by the cache store and rendered by ``GET /api/cache/stats`` and
``GET /health``.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

from src.domain.enums import CacheHealthStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheStatsReport:
    """Point-in-time cache statistics.

    Rates come from process-local counters (reset on restart, not shared
    across instances). Key count, memory and evictions come from the backend
    and are zero when it cannot be reached.

    Attributes:
        total_keys: Keys in the backend database.
        memory_usage: Backend ``used_memory`` in bytes.
        hit_rate: Hits / (hits + misses), 0.0 with no traffic.
        miss_rate: Misses / (hits + misses), 0.0 with no traffic.
        evictions: Backend ``evicted_keys``.
        hits: Process-local hit count.
        misses: Process-local miss count.
        sets: Process-local write count.
        deletes: Process-local delete count.
        namespaces: Per-namespace hit/miss counters.
    """

    total_keys: int = 0
    memory_usage: int = 0
    hit_rate: float = 0.0
    miss_rate: float = 0.0
    evictions: int = 0
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    namespaces: dict[str, dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict."""
        return asdict(self)


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheHealth:
    """Cache health check result.

    Attributes:
        connected: Whether PING succeeded.
        latency_ms: PING round trip in milliseconds (-1 when it failed).
        memory_usage_percent: used_memory / configured max memory * 100.
        status: Overall classification.
    """

    connected: bool
    latency_ms: float
    memory_usage_percent: float
    status: CacheHealthStatus

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict."""
        return {
            "connected": self.connected,
            "latency_ms": round(self.latency_ms, 2),
            "memory_usage_percent": round(self.memory_usage_percent, 2),
            "status": self.status.value,
        }
