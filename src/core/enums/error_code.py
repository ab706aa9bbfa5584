"""Domain-level error codes (machine-readable).

Codes follow the ENTITY_REASON naming convention and travel inside
DomainError instances returned through Result types.
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes."""

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Sessions
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_EXPIRED = "session_expired"
    SESSION_INVALIDATED = "session_invalidated"
    SESSION_IP_MISMATCH = "session_ip_mismatch"
    SESSION_STORE_UNAVAILABLE = "session_store_unavailable"

    # Cache
    CACHE_UNAVAILABLE = "cache_unavailable"

    # Audit trail
    AUDIT_RECORD_FAILED = "audit_record_failed"
