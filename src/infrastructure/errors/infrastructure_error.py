"""Infrastructure layer error types.

Infrastructure errors describe failures in external systems (the cache).
Like every error in the codebase they are DomainError values carried in a
Failure, not exceptions.

- ``code`` is the domain ErrorCode callers branch on.
- ``infrastructure_code`` records the specific backend failure for logs.
"""

from dataclasses import dataclass

from src.core.errors import DomainError
from src.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        infrastructure_code: Backend-specific error code.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Cache failure (wraps Redis exceptions and timeouts).

    ``details`` usually carries the key or pattern and the operation name.
    """

    pass
