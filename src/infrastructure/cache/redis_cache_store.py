"""Redis cache store implementing CacheStoreProtocol.

Stores JSON values wrapped in a CacheEntry envelope with a per-entry TTL.

Architecture:
- Implements CacheStoreProtocol without inheritance (structural typing)
- Every Redis call is bounded by a short operation timeout
- Reads fail open: backend errors and timeouts are misses
- Writes return Result types carrying CacheError
- Hit/miss/set/delete counters kept per namespace in CacheMetrics

TTL semantics:
    A hit rewrites the entry with its TTL re-armed to the original ``ttl``,
    so a key read more often than its TTL never expires. Entries written by
    ``set_expire_at`` keep their absolute deadline instead.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import CacheHealthStatus
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects.cache_reports import CacheHealth, CacheStatsReport
from src.infrastructure.cache.cache_entry import CacheEntry
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.cache_metrics import CacheMetrics
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError

DEFAULT_TTL_SECONDS = 3600
DEFAULT_OPERATION_TIMEOUT_MS = 250
DEFAULT_MAX_MEMORY_BYTES = 256 * 1024 * 1024
SCAN_BATCH_SIZE = 500


class RedisCacheStore:
    """Redis implementation of CacheStoreProtocol.

    Note: Does NOT inherit from CacheStoreProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client (``decode_responses=False``).
        _keys: Key registry, used to derive metric namespaces.
        _metrics: Process-local counters.
    """

    def __init__(
        self,
        redis_client: Redis,
        *,
        logger: LoggerProtocol,
        keys: CacheKeys | None = None,
        metrics: CacheMetrics | None = None,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        operation_timeout_ms: int = DEFAULT_OPERATION_TIMEOUT_MS,
        health_timeout_seconds: float = 2.0,
        max_memory_bytes: int = DEFAULT_MAX_MEMORY_BYTES,
        degraded_latency_ms: float = 100.0,
        unhealthy_latency_ms: float = 500.0,
        degraded_memory_percent: float = 90.0,
        unhealthy_memory_percent: float = 95.0,
    ) -> None:
        """Initialize the cache store.

        Args:
            redis_client: Async Redis client instance.
            logger: Structured logger.
            keys: Key registry (defaults to the ``chc_insight`` prefix).
            metrics: Counter store (a fresh one per cache store by default).
            default_ttl: TTL in seconds when a write does not give one.
            operation_timeout_ms: Budget for a single Redis call.
            health_timeout_seconds: Budget for the health check PING, longer
                than the operation timeout so slow latencies are observable.
            max_memory_bytes: Assumed Redis maxmemory for health percentages.
            degraded_latency_ms: PING latency above which health degrades.
            unhealthy_latency_ms: PING latency above which health fails.
            degraded_memory_percent: Memory use above which health degrades.
            unhealthy_memory_percent: Memory use above which health fails.

        Raises:
            ValueError: If default_ttl or operation_timeout_ms is not positive.
        """
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        if operation_timeout_ms <= 0:
            raise ValueError("operation_timeout_ms must be positive")

        self._redis = redis_client
        self._logger = logger
        self._keys = keys or CacheKeys()
        self._metrics = metrics or CacheMetrics()
        self._default_ttl = default_ttl
        self._timeout = operation_timeout_ms / 1000
        self._health_timeout = health_timeout_seconds
        self._max_memory_bytes = max_memory_bytes
        self._degraded_latency_ms = degraded_latency_ms
        self._unhealthy_latency_ms = unhealthy_latency_ms
        self._degraded_memory_percent = degraded_memory_percent
        self._unhealthy_memory_percent = unhealthy_memory_percent

    @property
    def metrics(self) -> CacheMetrics:
        """Process-local counters backing ``get_stats``."""
        return self._metrics

    @property
    def default_ttl(self) -> int:
        return self._default_ttl

    async def _call[T](self, awaitable: Awaitable[T]) -> T:
        async with asyncio.timeout(self._timeout):
            return await awaitable

    def _namespace(self, key: str) -> str:
        return self._keys.namespace_from_key(key)

    def _failure(
        self,
        *,
        operation: str,
        error: Exception,
        infrastructure_code: InfrastructureErrorCode,
        **details: Any,
    ) -> Failure[CacheError]:
        if isinstance(error, TimeoutError):
            infrastructure_code = InfrastructureErrorCode.CACHE_TIMEOUT
            message = f"Cache {operation} timed out"
        else:
            message = f"Cache {operation} failed"
        self._logger.warning(
            "cache_operation_failed",
            operation=operation,
            error_type=type(error).__name__,
            error_message=str(error),
            **details,
        )
        return Failure(
            error=CacheError(
                code=ErrorCode.CACHE_UNAVAILABLE,
                infrastructure_code=infrastructure_code,
                message=message,
                details={"operation": operation, "error": str(error), **details},
            )
        )

    @staticmethod
    def _invalid(message: str, **details: Any) -> Failure[CacheError]:
        return Failure(
            error=CacheError(
                code=ErrorCode.VALIDATION_FAILED,
                infrastructure_code=InfrastructureErrorCode.CACHE_INVALID_ARGUMENT,
                message=message,
                details=details or None,
            )
        )

    async def _read_entry(self, key: str) -> CacheEntry | None:
        """Fetch and decode one entry, re-arming its TTL on a hit.

        Returns:
            The entry (whose ``data`` may be None), or None on a miss.
        """
        namespace = self._namespace(key)
        try:
            raw = await self._call(self._redis.get(key))
        except (RedisError, TimeoutError) as e:
            self._metrics.record_error(namespace)
            self._metrics.record_miss(namespace)
            self._logger.warning(
                "cache_get_failed",
                key=key,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return None

        if raw is None:
            self._metrics.record_miss(namespace)
            return None

        entry = CacheEntry.from_json(raw)
        if entry is None:
            self._metrics.record_miss(namespace)
            self._logger.warning("cache_entry_malformed", key=key)
            return None

        self._metrics.record_hit(namespace)
        entry.hits += 1
        try:
            # xx=True: never resurrect a key deleted between GET and SET.
            if entry.expire_at is not None:
                await self._call(
                    self._redis.set(key, entry.to_json(), keepttl=True, xx=True)
                )
            else:
                await self._call(
                    self._redis.set(key, entry.to_json(), ex=entry.ttl, xx=True)
                )
        except (RedisError, TimeoutError) as e:
            self._logger.debug(
                "cache_touch_failed", key=key, error_type=type(e).__name__
            )
        return entry

    async def get(self, key: str) -> Any | None:
        """Get a cached value.

        Args:
            key: Full cache key.

        Returns:
            The stored JSON value, or None on a miss, a malformed entry, a
            timeout or a backend error.
        """
        entry = await self._read_entry(key)
        return entry.data if entry is not None else None

    async def set(
        self, key: str, value: Any, ttl: int | None = None
    ) -> Result[None, CacheError]:
        """Store a value, overwriting any previous entry.

        Args:
            key: Full cache key.
            value: JSON-serializable value.
            ttl: Seconds to live (store default when None, must be > 0).

        Returns:
            Success(None), or Failure(CacheError) with VALIDATION_FAILED for
            a bad ttl or unserializable value and CACHE_UNAVAILABLE for
            backend failures.
        """
        effective_ttl = self._default_ttl if ttl is None else ttl
        if effective_ttl <= 0:
            return self._invalid("ttl must be positive", key=key, ttl=ttl)

        try:
            payload = CacheEntry.create(value, effective_ttl).to_json()
        except (TypeError, ValueError) as e:
            return self._invalid(
                f"Value for key '{key}' is not JSON-serializable",
                key=key,
                error=str(e),
            )

        try:
            await self._call(self._redis.setex(key, effective_ttl, payload))
        except (RedisError, TimeoutError) as e:
            self._metrics.record_error(self._namespace(key))
            return self._failure(
                operation="set",
                error=e,
                infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                key=key,
            )

        self._metrics.record_set(self._namespace(key))
        return Success(value=None)

    async def delete(self, key: str) -> Result[bool, CacheError]:
        """Delete one key.

        Returns:
            Success(True) if the key existed, Success(False) otherwise.
        """
        try:
            deleted = await self._call(self._redis.delete(key))
        except (RedisError, TimeoutError) as e:
            self._metrics.record_error(self._namespace(key))
            return self._failure(
                operation="delete",
                error=e,
                infrastructure_code=InfrastructureErrorCode.CACHE_DELETE_ERROR,
                key=key,
            )
        if deleted:
            self._metrics.record_delete(self._namespace(key), deleted)
        return Success(value=deleted > 0)

    async def delete_pattern(self, pattern: str) -> Result[int, CacheError]:
        """Delete every key matching a glob pattern.

        Walks the keyspace with SCAN (never KEYS) and deletes each batch.
        Each SCAN and DEL call gets its own operation timeout.

        Args:
            pattern: Redis glob pattern, e.g. ``chc_insight:form:*:{tenant}``.

        Returns:
            Success(number of keys deleted).
        """
        if not pattern:
            return self._invalid("pattern must not be empty")

        deleted = 0
        cursor: int = 0
        try:
            while True:
                cursor, batch = await self._call(
                    self._redis.scan(cursor=cursor, match=pattern, count=SCAN_BATCH_SIZE)
                )
                if batch:
                    deleted += await self._call(self._redis.delete(*batch))
                if cursor == 0:
                    break
        except (RedisError, TimeoutError) as e:
            self._metrics.record_error(self._namespace(pattern))
            return self._failure(
                operation="delete_pattern",
                error=e,
                infrastructure_code=InfrastructureErrorCode.CACHE_DELETE_ERROR,
                pattern=pattern,
                deleted_before_failure=deleted,
            )

        if deleted:
            self._metrics.record_delete(self._namespace(pattern), deleted)
        self._logger.debug("cache_pattern_deleted", pattern=pattern, deleted=deleted)
        return Success(value=deleted)

    async def exists(self, key: str) -> bool:
        """True if the key is present; False when absent or on error."""
        try:
            return bool(await self._call(self._redis.exists(key)))
        except (RedisError, TimeoutError) as e:
            self._metrics.record_error(self._namespace(key))
            self._logger.warning(
                "cache_exists_failed", key=key, error_type=type(e).__name__
            )
            return False

    async def get_or_set[T](
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl: int | None = None,
    ) -> T:
        """Read-through: cached value on a hit, otherwise compute and store.

        A cached ``null`` counts as a hit. There is no single-flight: two
        concurrent misses both call ``compute`` and the last write wins.
        Exceptions from ``compute`` propagate; cache write failures are
        logged and the computed value is still returned.
        """
        entry = await self._read_entry(key)
        if entry is not None:
            return entry.data

        value = await compute()
        result = await self.set(key, value, ttl)
        if isinstance(result, Failure):
            self._logger.warning(
                "cache_populate_failed", key=key, error=result.error.message
            )
        return value

    async def increment(
        self, key: str, amount: int = 1, ttl: int | None = None
    ) -> Result[int, CacheError]:
        """Atomically increment an integer counter.

        The TTL is applied only when the counter was just created (the new
        value equals ``amount``), so an existing window is not extended.

        Counters are raw Redis integers, not CacheEntry envelopes; ``get``
        on a counter key reads as a miss.
        """
        if ttl is not None and ttl <= 0:
            return self._invalid("ttl must be positive", key=key, ttl=ttl)

        try:
            value = await self._call(self._redis.incrby(key, amount))
            if ttl is not None and value == amount:
                await self._call(self._redis.expire(key, ttl))
        except (RedisError, TimeoutError) as e:
            self._metrics.record_error(self._namespace(key))
            return self._failure(
                operation="increment",
                error=e,
                infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                key=key,
            )
        return Success(value=int(value))

    async def set_expire_at(
        self, key: str, value: Any, at: datetime
    ) -> Result[None, CacheError]:
        """Store a value that expires at an absolute instant.

        SET and EXPIREAT run in one MULTI/EXEC pipeline. Reads keep the
        deadline rather than re-arming a relative TTL.

        Args:
            key: Full cache key.
            value: JSON-serializable value.
            at: Deadline; naive datetimes are taken as UTC. Must be in the
                future.
        """
        deadline_at = at if at.tzinfo is not None else at.replace(tzinfo=UTC)
        deadline = int(deadline_at.timestamp())
        now = int(time.time())
        if deadline <= now:
            return self._invalid(
                "expiry must be in the future", key=key, at=deadline_at.isoformat()
            )

        try:
            payload = CacheEntry.create(
                value, ttl=deadline - now, expire_at=deadline
            ).to_json()
        except (TypeError, ValueError) as e:
            return self._invalid(
                f"Value for key '{key}' is not JSON-serializable",
                key=key,
                error=str(e),
            )

        async def _write() -> None:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.set(key, payload)
                pipe.expireat(key, deadline)
                await pipe.execute()

        try:
            await self._call(_write())
        except (RedisError, TimeoutError) as e:
            self._metrics.record_error(self._namespace(key))
            return self._failure(
                operation="set_expire_at",
                error=e,
                infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                key=key,
            )

        self._metrics.record_set(self._namespace(key))
        return Success(value=None)

    async def clear(self) -> Result[None, CacheError]:
        """Flush the whole Redis database and reset counters.

        WARNING: Clears ALL cache data! Use only in tests and admin tooling.
        """
        try:
            await self._call(self._redis.flushdb())
        except (RedisError, TimeoutError) as e:
            return self._failure(
                operation="clear",
                error=e,
                infrastructure_code=InfrastructureErrorCode.CACHE_DELETE_ERROR,
            )
        self._metrics.reset()
        return Success(value=None)

    async def get_stats(self) -> CacheStatsReport:
        """Collect cache statistics.

        Rates come from process-local counters and are always available.
        Key count, memory and evictions come from DBSIZE / INFO and stay zero
        when Redis cannot be reached.
        """
        totals = self._metrics.totals()
        reads = totals.hits + totals.misses
        hit_rate = totals.hits / reads if reads else 0.0
        miss_rate = totals.misses / reads if reads else 0.0

        total_keys = 0
        memory_usage = 0
        evictions = 0
        try:
            total_keys = int(await self._call(self._redis.dbsize()))
        except (RedisError, TimeoutError) as e:
            self._logger.warning("cache_stats_dbsize_failed", error=str(e))
        try:
            info = await self._call(self._redis.info())
            memory_usage = int(info.get("used_memory", 0))
            evictions = int(info.get("evicted_keys", 0))
        except (RedisError, TimeoutError) as e:
            self._logger.warning("cache_stats_info_failed", error=str(e))

        return CacheStatsReport(
            total_keys=total_keys,
            memory_usage=memory_usage,
            hit_rate=round(hit_rate, 4),
            miss_rate=round(miss_rate, 4),
            evictions=evictions,
            hits=totals.hits,
            misses=totals.misses,
            sets=totals.sets,
            deletes=totals.deletes,
            namespaces=self._metrics.get_all_stats(),
        )

    async def health_check(self) -> CacheHealth:
        """Ping Redis and classify health.

        Returns:
            CacheHealth. A failed PING reports ``connected=False``,
            ``latency_ms=-1`` and UNHEALTHY.
        """
        started = time.perf_counter()
        try:
            async with asyncio.timeout(self._health_timeout):
                await self._redis.ping()
        except (RedisError, TimeoutError, OSError) as e:
            self._logger.error("cache_health_check_failed", error=e)
            return CacheHealth(
                connected=False,
                latency_ms=-1,
                memory_usage_percent=0.0,
                status=CacheHealthStatus.UNHEALTHY,
            )
        latency_ms = (time.perf_counter() - started) * 1000

        memory_percent = 0.0
        try:
            info = await self._call(self._redis.info("memory"))
            used_memory = int(info.get("used_memory", 0))
            memory_percent = used_memory / self._max_memory_bytes * 100
        except (RedisError, TimeoutError) as e:
            self._logger.warning("cache_health_memory_unavailable", error=str(e))

        return CacheHealth(
            connected=True,
            latency_ms=latency_ms,
            memory_usage_percent=memory_percent,
            status=self._classify(latency_ms, memory_percent),
        )

    def _classify(self, latency_ms: float, memory_percent: float) -> CacheHealthStatus:
        if (
            latency_ms > self._unhealthy_latency_ms
            or memory_percent > self._unhealthy_memory_percent
        ):
            return CacheHealthStatus.UNHEALTHY
        if (
            latency_ms > self._degraded_latency_ms
            or memory_percent > self._degraded_memory_percent
        ):
            return CacheHealthStatus.DEGRADED
        return CacheHealthStatus.HEALTHY

    async def close(self) -> None:
        """Close the Redis client and its connection pool."""
        await self._redis.aclose()
