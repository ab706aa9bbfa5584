"""Cache health classification.

Reported by the cache store health check and surfaced on ``GET /health``.
"""

from enum import Enum


class CacheHealthStatus(str, Enum):
    """Overall cache health.

    HEALTHY: Reachable, fast, memory headroom available.
    DEGRADED: Reachable but slow or close to its memory limit.
    UNHEALTHY: Unreachable, very slow, or nearly out of memory.
    """

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
