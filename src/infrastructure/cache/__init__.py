"""Cache infrastructure.

- cache_entry.py: stored JSON envelope
- cache_keys.py: key namespace registry
- cache_metrics.py: per-namespace counters
- redis_cache_store.py: Redis-backed CacheStoreProtocol
- domain_cache.py: read-through caching of forms and dashboards
"""

from src.infrastructure.cache.cache_entry import CacheEntry
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.cache_metrics import CacheMetrics
from src.infrastructure.cache.domain_cache import DomainCache, WarmupReport
from src.infrastructure.cache.redis_cache_store import RedisCacheStore

__all__ = [
    "CacheEntry",
    "CacheKeys",
    "CacheMetrics",
    "DomainCache",
    "RedisCacheStore",
    "WarmupReport",
]
