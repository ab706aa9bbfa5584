"""Infrastructure-specific error codes.

Internal codes for tracking cache failures. They ride along on
InfrastructureError next to the domain ErrorCode.
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    CACHE_TIMEOUT = "cache_timeout"
    CACHE_SET_ERROR = "cache_set_error"
    CACHE_DELETE_ERROR = "cache_delete_error"
    CACHE_INVALID_ARGUMENT = "cache_invalid_argument"
