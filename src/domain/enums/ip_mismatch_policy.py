"""What session validation does when the request IP differs from the session IP.

Clients behind NAT, mobile networks and corporate proxies change IP
legitimately, so the default only warns.
"""

from enum import Enum


class IpMismatchPolicy(str, Enum):
    """IP binding policy for session validation.

    Values:
        IGNORE: Do nothing.
        WARN: Log a warning and continue.
        REJECT: Log a warning and fail validation (session stays active).
    """

    IGNORE = "ignore"
    WARN = "warn"
    REJECT = "reject"
