"""Domain enums for business logic.

Available Enums:
    - AuthEventKind: Session lifecycle events sent to the audit trail
    - CacheHealthStatus: Cache health classification
    - IpMismatchPolicy: Behavior when a session is used from a new IP
    - SameSiteMode: Session cookie SameSite attribute
    - SessionErrorCode: HTTP-facing session rejection codes
"""

from src.domain.enums.auth_event_kind import AuthEventKind
from src.domain.enums.cache_health_status import CacheHealthStatus
from src.domain.enums.ip_mismatch_policy import IpMismatchPolicy
from src.domain.enums.same_site_mode import SameSiteMode
from src.domain.enums.session_error_code import SessionErrorCode

__all__ = [
    "AuthEventKind",
    "CacheHealthStatus",
    "IpMismatchPolicy",
    "SameSiteMode",
    "SessionErrorCode",
]
