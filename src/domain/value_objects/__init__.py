"""Domain value objects."""

from src.domain.value_objects.cache_reports import CacheHealth, CacheStatsReport
from src.domain.value_objects.request_context import RequestContext

__all__ = [
    "CacheHealth",
    "CacheStatsReport",
    "RequestContext",
]
