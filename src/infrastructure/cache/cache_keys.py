"""Cache key construction utilities.

Every cache key in the application is built here so formats stay consistent
and tenant isolation is structural: the tenant id is always its own
``:``-separated segment directly after a literal namespace, so two tenants
can never share a key or match the same invalidation pattern.

All keys follow ``{prefix}:{namespace}:...``.

Usage:
    from src.core.config import settings
    from src.infrastructure.cache.cache_keys import CacheKeys

    keys = CacheKeys(prefix=settings.cache_key_prefix)

    keys.form_category(tenant_id)               # chc_insight:form:categories:{t}
    keys.form_category(tenant_id, category_id)  # chc_insight:form:category:{t}:{c}
    keys.form_hierarchy_patterns(tenant_id)     # globs for delete_pattern
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

type Identifier = UUID | str

# Form sub-namespaces whose keys continue after the tenant segment.
_FORM_ENTRY_NAMESPACES = (
    "category",
    "types",
    "type",
    "templates",
    "template",
    "instance",
)

# Bracket classes read the same under Redis and fnmatch; a backslash can
# only be escaped with another backslash in Redis.
_GLOB_ESCAPES = str.maketrans({"*": "[*]", "?": "[?]", "[": "[[]", "\\": "\\\\"})


def glob_escape(value: Identifier) -> str:
    """Make an identifier match only itself inside a Redis glob.

    Example:
        glob_escape("t*")  # "t[*]"
    """
    return str(value).translate(_GLOB_ESCAPES)


@dataclass(frozen=True)
class CacheKeys:
    """Centralized cache key construction.

    Pure functions: the same input always yields the same key.

    Attributes:
        prefix: Key prefix (typically "chc_insight").
    """

    prefix: str = "chc_insight"

    def _key(self, *parts: object) -> str:
        return ":".join([self.prefix, *(str(part) for part in parts)])

    # Form hierarchy

    def form_category(
        self, tenant_id: Identifier, category_id: Identifier | None = None
    ) -> str:
        """One category, or the tenant's category list when ``category_id`` is omitted.

        Patterns:
            {prefix}:form:category:{tenant_id}:{category_id}
            {prefix}:form:categories:{tenant_id}
        """
        if category_id is None:
            return self._key("form", "categories", tenant_id)
        return self._key("form", "category", tenant_id, category_id)

    def form_type(
        self,
        tenant_id: Identifier,
        category_id: Identifier,
        type_id: Identifier | None = None,
    ) -> str:
        """One form type, or the type list of a category.

        Patterns:
            {prefix}:form:type:{tenant_id}:{category_id}:{type_id}
            {prefix}:form:types:{tenant_id}:{category_id}
        """
        if type_id is None:
            return self._key("form", "types", tenant_id, category_id)
        return self._key("form", "type", tenant_id, category_id, type_id)

    def form_template(
        self,
        tenant_id: Identifier,
        type_id: Identifier,
        template_id: Identifier | None = None,
    ) -> str:
        """One template, or the template list of a form type.

        Patterns:
            {prefix}:form:template:{tenant_id}:{type_id}:{template_id}
            {prefix}:form:templates:{tenant_id}:{type_id}
        """
        if template_id is None:
            return self._key("form", "templates", tenant_id, type_id)
        return self._key("form", "template", tenant_id, type_id, template_id)

    def active_form_templates(self, tenant_id: Identifier) -> str:
        """All active templates of a tenant (written by cache warm-up).

        Pattern: {prefix}:form:templates:{tenant_id}:active
        """
        return self._key("form", "templates", tenant_id, "active")

    def form_instance(self, tenant_id: Identifier, instance_id: Identifier) -> str:
        """Pattern: {prefix}:form:instance:{tenant_id}:{instance_id}"""
        return self._key("form", "instance", tenant_id, instance_id)

    # Members and providers

    def member(self, tenant_id: Identifier, member_id: Identifier) -> str:
        """Pattern: {prefix}:member:{tenant_id}:{member_id}"""
        return self._key("member", tenant_id, member_id)

    def member_search(
        self, tenant_id: Identifier, query: str, filters: str | None = None
    ) -> str:
        """Pattern: {prefix}:member:search:{tenant_id}:{query}[:{filters}]"""
        if filters:
            return self._key("member", "search", tenant_id, query, filters)
        return self._key("member", "search", tenant_id, query)

    def provider(self, tenant_id: Identifier, provider_id: Identifier) -> str:
        """Pattern: {prefix}:provider:{tenant_id}:{provider_id}"""
        return self._key("provider", tenant_id, provider_id)

    def provider_search(
        self, tenant_id: Identifier, query: str, filters: str | None = None
    ) -> str:
        """Pattern: {prefix}:provider:search:{tenant_id}:{query}[:{filters}]"""
        if filters:
            return self._key("provider", "search", tenant_id, query, filters)
        return self._key("provider", "search", tenant_id, query)

    # Dashboards

    def dashboard_metrics(
        self,
        tenant_id: Identifier,
        user_id: Identifier | None = None,
        timeframe: str | None = None,
    ) -> str:
        """Pattern: {prefix}:dashboard:metrics:{tenant_id}[:{user_id}][:{timeframe}]"""
        parts: list[object] = ["dashboard", "metrics", tenant_id]
        if user_id is not None:
            parts.append(user_id)
        if timeframe:
            parts.append(timeframe)
        return self._key(*parts)

    # Sessions, permissions, rate limits, audit

    def user_session(self, session_id: str) -> str:
        """Pattern: {prefix}:session:{session_id}"""
        return self._key("session", session_id)

    def user_permissions(self, user_id: Identifier, tenant_id: Identifier) -> str:
        """Pattern: {prefix}:permissions:{user_id}:{tenant_id}"""
        return self._key("permissions", user_id, tenant_id)

    def rate_limit_counter(self, ip: str, endpoint: str | None = None) -> str:
        """Pattern: {prefix}:ratelimit:{ip}[:{endpoint}]"""
        if endpoint:
            return self._key("ratelimit", ip, endpoint)
        return self._key("ratelimit", ip)

    def audit_log(self, tenant_id: Identifier, day: date) -> str:
        """Pattern: {prefix}:audit:{tenant_id}:{YYYY-MM-DD}"""
        return self._key("audit", tenant_id, day.isoformat())

    # Invalidation patterns

    def form_hierarchy_patterns(self, tenant_id: Identifier) -> tuple[str, ...]:
        """Globs matching every form hierarchy key of one tenant.

        One pattern per form sub-namespace with the tenant segment right
        after it. A leading ``form:*`` would let ``*`` run across ``:`` and
        reach another tenant's segment (``form:types:10:1`` for tenant
        ``1``), so the sub-namespaces are spelled out.
        """
        tenant = glob_escape(tenant_id)
        patterns = [self._key("form", "categories", tenant)]
        for namespace in _FORM_ENTRY_NAMESPACES:
            patterns.append(self._key("form", namespace, tenant, "*"))
        return tuple(patterns)

    def tenant_patterns(
        self, namespace: str, tenant_id: Identifier
    ) -> tuple[str, str]:
        """Globs matching every key of ``namespace`` for one tenant.

        Two patterns because Redis globs cannot express "tenant segment
        followed by ``:`` or end of key".

        Example:
            keys.tenant_patterns("dashboard:metrics", tenant_id)
            # ("chc_insight:dashboard:metrics:{t}", "chc_insight:dashboard:metrics:{t}:*")
        """
        exact = self._key(namespace, glob_escape(tenant_id))
        return exact, f"{exact}:*"

    def namespace_from_key(self, key: str) -> str:
        """Extract the namespace segment used for metrics.

        Example:
            keys.namespace_from_key("chc_insight:form:categories:t1")  # "form"
        """
        parts = key.split(":")
        if len(parts) >= 2:
            return parts[1]
        return "unknown"
