"""HTTP-facing session rejection codes.

These are the codes clients see in a rejected request body:

    {"success": false, "error": {"code": "NO_SESSION", "message": "..."}}

Internal failure reasons (``ErrorCode.SESSION_EXPIRED`` and friends) all
collapse to ``INVALID_SESSION`` so clients cannot learn why a token failed.
"""

from enum import Enum


class SessionErrorCode(str, Enum):
    """Session rejection codes returned by the session middleware."""

    NO_SESSION = "NO_SESSION"
    INVALID_SESSION = "INVALID_SESSION"
    SESSION_ERROR = "SESSION_ERROR"
