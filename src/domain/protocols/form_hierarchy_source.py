"""Origin data source for the form hierarchy.

The form hierarchy (category -> type -> template) lives in the relational
store owned by the forms feature. Cache warm-up only needs these three read
operations, so the cache layer depends on this protocol instead of the forms
repositories.
"""

from typing import Any, Protocol
from uuid import UUID


class FormHierarchySource(Protocol):
    """Read-only access to a tenant's form hierarchy.

    Every returned item is a JSON-serializable dict carrying at least ``id``.
    """

    async def list_active_categories(self, tenant_id: UUID) -> list[dict[str, Any]]:
        """Active form categories for the tenant."""
        ...

    async def list_active_types(
        self, tenant_id: UUID, category_id: str
    ) -> list[dict[str, Any]]:
        """Active form types within one category."""
        ...

    async def list_active_templates(self, tenant_id: UUID) -> list[dict[str, Any]]:
        """Active form templates across all types of the tenant."""
        ...
