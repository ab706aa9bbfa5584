"""Cache store protocol (port).

Key/value cache of JSON documents with per-entry TTL, glob-pattern
invalidation, counters and statistics. The cache is an accelerator: callers
must stay correct when it is empty or unreachable.

Error Handling:
    - Reads (``get``, ``exists``, ``get_or_set``) never fail. Backend errors
      and timeouts read as a miss.
    - Writes return ``Result``; a Failure carries a CacheError the caller
      may log and ignore.

Implementations:
    - RedisCacheStore: Redis via ``redis.asyncio``
"""

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, Protocol

from src.core.errors import DomainError
from src.core.result import Result
from src.domain.value_objects.cache_reports import CacheHealth, CacheStatsReport


class CacheStoreProtocol(Protocol):
    """What the application needs from a cache."""

    async def get(self, key: str) -> Any | None:
        """Return the cached JSON value, or None on a miss.

        A hit re-arms the entry's TTL.
        """
        ...

    async def set(
        self, key: str, value: Any, ttl: int | None = None
    ) -> Result[None, DomainError]:
        """Store a JSON-serializable value (overwrites).

        Args:
            key: Full cache key.
            value: JSON-serializable payload (``None`` is a valid value).
            ttl: Seconds to live; store default when omitted, must be > 0.
        """
        ...

    async def delete(self, key: str) -> Result[bool, DomainError]:
        """Remove one key. Success(True) if it existed."""
        ...

    async def delete_pattern(self, pattern: str) -> Result[int, DomainError]:
        """Remove every key matching a glob pattern. Success(count)."""
        ...

    async def exists(self, key: str) -> bool:
        """True if the key is present (False on backend error)."""
        ...

    async def get_or_set[T](
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl: int | None = None,
    ) -> T:
        """Read-through helper.

        Returns the cached value on a hit. Otherwise awaits ``compute``,
        stores the result and returns it. Concurrent misses may each call
        ``compute``.
        """
        ...

    async def increment(
        self, key: str, amount: int = 1, ttl: int | None = None
    ) -> Result[int, DomainError]:
        """Atomically add ``amount`` to an integer counter.

        ``ttl`` is applied only when the counter was just created.
        """
        ...

    async def set_expire_at(
        self, key: str, value: Any, at: datetime
    ) -> Result[None, DomainError]:
        """Store a value that expires at an absolute (future) instant."""
        ...

    async def get_stats(self) -> CacheStatsReport:
        """Return hit/miss rates and backend key/memory figures."""
        ...

    async def health_check(self) -> CacheHealth:
        """Check the backend and classify its health."""
        ...
