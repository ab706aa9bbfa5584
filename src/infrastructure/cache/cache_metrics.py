"""Cache metrics tracking for observability.

Lightweight in-process counters for cache operations, tracked per key
namespace ("form", "dashboard", "session", ...). Counters reset on restart
and are not shared between processes; the stats endpoint reports them as
such.

Usage:
    metrics = CacheMetrics()
    metrics.record_hit("form")
    metrics.record_miss("form")

    metrics.hit_rate()          # 0.5
    metrics.get_stats("form")   # {"hits": 1, "misses": 1, ...}
"""

from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Any


@dataclass
class CacheStats:
    """Counters for one cache namespace.

    Attributes:
        hits: Reads that found a value.
        misses: Reads that found nothing (or failed).
        sets: Successful writes.
        deletes: Keys removed.
        errors: Backend errors and timeouts.
    """

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    errors: int = 0

    @property
    def total_requests(self) -> int:
        """Total reads (hits + misses)."""
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Hit rate (0.0 to 1.0)."""
        if self.total_requests == 0:
            return 0.0
        return self.hits / self.total_requests

    def to_dict(self) -> dict[str, Any]:
        """Convert stats to dictionary for JSON serialization."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "deletes": self.deletes,
            "errors": self.errors,
            "total_requests": self.total_requests,
            "hit_rate": round(self.hit_rate, 4),
        }


class CacheMetrics:
    """In-memory cache metrics tracker.

    One instance per cache store (no module-level singleton). A threading
    lock keeps counters consistent if the store is shared with sync code.
    """

    def __init__(self) -> None:
        self._stats: dict[str, CacheStats] = defaultdict(CacheStats)
        self._lock = Lock()

    def record_hit(self, namespace: str) -> None:
        with self._lock:
            self._stats[namespace].hits += 1

    def record_miss(self, namespace: str) -> None:
        with self._lock:
            self._stats[namespace].misses += 1

    def record_set(self, namespace: str) -> None:
        with self._lock:
            self._stats[namespace].sets += 1

    def record_delete(self, namespace: str, count: int = 1) -> None:
        with self._lock:
            self._stats[namespace].deletes += count

    def record_error(self, namespace: str) -> None:
        with self._lock:
            self._stats[namespace].errors += 1

    def totals(self) -> CacheStats:
        """Sum counters across all namespaces."""
        with self._lock:
            total = CacheStats()
            for stats in self._stats.values():
                total.hits += stats.hits
                total.misses += stats.misses
                total.sets += stats.sets
                total.deletes += stats.deletes
                total.errors += stats.errors
            return total

    def hit_rate(self) -> float:
        """Overall hit rate (0.0 with no reads)."""
        return self.totals().hit_rate

    def get_stats(self, namespace: str) -> dict[str, Any]:
        """Get statistics for one namespace.

        Args:
            namespace: Cache namespace to query.

        Returns:
            Dictionary with hits, misses, sets, deletes, errors,
            total_requests and hit_rate.
        """
        with self._lock:
            stats = self._stats.get(namespace, CacheStats())
            return stats.to_dict()

    def get_all_stats(self) -> dict[str, dict[str, Any]]:
        """Get statistics for all namespaces."""
        with self._lock:
            return {
                namespace: stats.to_dict() for namespace, stats in self._stats.items()
            }

    def reset(self, namespace: str | None = None) -> None:
        """Reset one namespace, or everything when ``namespace`` is None."""
        with self._lock:
            if namespace is None:
                self._stats.clear()
            else:
                self._stats[namespace] = CacheStats()
