"""Read-through caching for the form hierarchy and dashboards.

Thin layer over a cache store that knows the key layout and TTL of each
cached domain object. Origin data comes from injected fetch callables or a
FormHierarchySource; every read falls back to origin when the cache is empty
or unreachable, so correctness never depends on the cache.

TTLs:
    form categories / types: 1 hour
    form templates:          30 minutes
    dashboard metrics:       5 minutes

Usage:
    cache = DomainCache(cache_store, keys, logger)

    categories = await cache.get_form_categories(
        tenant_id, lambda: repo.list_categories(tenant_id)
    )

    # After an admin edits the hierarchy:
    await cache.invalidate_form_hierarchy(tenant_id)
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from src.core.result import Failure, Success
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.domain.protocols.form_hierarchy_source import FormHierarchySource
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.infrastructure.cache.cache_keys import CacheKeys

FORM_HIERARCHY_TTL_SECONDS = 3600
FORM_TEMPLATE_TTL_SECONDS = 1800
DASHBOARD_TTL_SECONDS = 300

type Fetch[T] = Callable[[], Awaitable[T]]


@dataclass(frozen=True, slots=True, kw_only=True)
class WarmupReport:
    """Outcome of a cache warm-up.

    Attributes:
        categories_cached: Category lists written (0 or 1).
        types_cached: Per-category type lists written.
        templates_cached: Active template lists written (0 or 1).
    """

    categories_cached: int = 0
    types_cached: int = 0
    templates_cached: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "categories_cached": self.categories_cached,
            "types_cached": self.types_cached,
            "templates_cached": self.templates_cached,
        }


class DomainCache:
    """Domain-aware read-through cache.

    Attributes:
        _cache: Underlying cache store.
        _keys: Key registry.
    """

    def __init__(
        self,
        cache: CacheStoreProtocol,
        keys: CacheKeys,
        logger: LoggerProtocol,
    ) -> None:
        self._cache = cache
        self._keys = keys
        self._logger = logger.bind(component="domain_cache")

    async def get_form_categories[T](self, tenant_id: UUID, fetch: Fetch[T]) -> T:
        """Form categories of a tenant (1 hour)."""
        return await self._cache.get_or_set(
            self._keys.form_category(tenant_id),
            fetch,
            FORM_HIERARCHY_TTL_SECONDS,
        )

    async def get_form_types[T](
        self, tenant_id: UUID, category_id: str, fetch: Fetch[T]
    ) -> T:
        """Form types of one category (1 hour)."""
        return await self._cache.get_or_set(
            self._keys.form_type(tenant_id, category_id),
            fetch,
            FORM_HIERARCHY_TTL_SECONDS,
        )

    async def get_form_templates[T](
        self, tenant_id: UUID, type_id: str, fetch: Fetch[T]
    ) -> T:
        """Templates of one form type (30 minutes)."""
        return await self._cache.get_or_set(
            self._keys.form_template(tenant_id, type_id),
            fetch,
            FORM_TEMPLATE_TTL_SECONDS,
        )

    async def get_dashboard_metrics[T](
        self,
        tenant_id: UUID,
        fetch: Fetch[T],
        user_id: UUID | None = None,
        timeframe: str | None = None,
    ) -> T:
        """Dashboard metrics, optionally per user and timeframe (5 minutes)."""
        return await self._cache.get_or_set(
            self._keys.dashboard_metrics(tenant_id, user_id, timeframe),
            fetch,
            DASHBOARD_TTL_SECONDS,
        )

    async def invalidate_form_hierarchy(self, tenant_id: UUID) -> int:
        """Drop every cached form hierarchy entry of one tenant.

        Returns:
            Keys deleted (0 when the cache is unavailable).
        """
        return await self._delete_patterns(self._keys.form_hierarchy_patterns(tenant_id))

    async def invalidate_dashboards(self, tenant_id: UUID) -> int:
        """Drop every cached dashboard entry of one tenant.

        Returns:
            Keys deleted (0 when the cache is unavailable).
        """
        return await self._delete_patterns(
            self._keys.tenant_patterns("dashboard:metrics", tenant_id)
        )

    async def warm_form_hierarchy(
        self, tenant_id: UUID, source: FormHierarchySource
    ) -> WarmupReport:
        """Pre-populate the tenant's form hierarchy.

        Caches the active categories, the types of each category, and all
        active templates under ``form:templates:{tenant}:active``. Write
        failures are logged and not counted; origin failures propagate.
        """
        categories = await source.list_active_categories(tenant_id)
        categories_cached = await self._store(
            self._keys.form_category(tenant_id),
            categories,
            FORM_HIERARCHY_TTL_SECONDS,
        )

        types_cached = 0
        for category in categories:
            category_id = str(category["id"])
            types = await source.list_active_types(tenant_id, category_id)
            types_cached += await self._store(
                self._keys.form_type(tenant_id, category_id),
                types,
                FORM_HIERARCHY_TTL_SECONDS,
            )

        templates = await source.list_active_templates(tenant_id)
        templates_cached = await self._store(
            self._keys.active_form_templates(tenant_id),
            templates,
            FORM_TEMPLATE_TTL_SECONDS,
        )

        report = WarmupReport(
            categories_cached=categories_cached,
            types_cached=types_cached,
            templates_cached=templates_cached,
        )
        self._logger.info(
            "form_hierarchy_warmed", tenant_id=str(tenant_id), **report.to_dict()
        )
        return report

    async def _store(self, key: str, value: Any, ttl: int) -> int:
        result = await self._cache.set(key, value, ttl)
        if isinstance(result, Failure):
            self._logger.warning("cache_warm_write_failed", key=key)
            return 0
        return 1

    async def _delete_patterns(self, patterns: tuple[str, ...]) -> int:
        deleted = 0
        for pattern in patterns:
            match await self._cache.delete_pattern(pattern):
                case Success(value=count):
                    deleted += count
                case Failure(error=err):
                    self._logger.warning(
                        "cache_invalidation_failed",
                        pattern=pattern,
                        error=err.message,
                    )
        return deleted
