"""Session manager configuration.

Immutable, validated configuration for SessionManager. Build it directly in
tests, or from application settings with ``SessionConfig.from_settings``.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from src.domain.enums import IpMismatchPolicy, SameSiteMode

if TYPE_CHECKING:
    from src.core.config import Settings


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionConfig:
    """Session lifecycle and transport configuration.

    Attributes:
        max_age: Session lifetime from creation or renewal (default 8h).
        renewal_threshold: Remaining lifetime below which an access slides
            the expiry forward (default 30min).
        max_concurrent_sessions: Active sessions allowed per user
            (default 3). Soft cap: concurrent logins may briefly exceed it.
        require_secure: Reject session traffic that did not arrive over
            HTTPS and mark the cookie Secure.
        same_site: Session cookie SameSite mode.
        ip_mismatch_policy: What validation does when the request IP
            differs from the session IP.
        store_timeout: Budget for each session store call.
        mirror_to_cache: Write sessions to the cache as a read hint.

    Example:
        >>> config = SessionConfig(max_age=timedelta(hours=1),
        ...                        renewal_threshold=timedelta(minutes=5))
        >>> config.max_concurrent_sessions
        3
    """

    max_age: timedelta = timedelta(hours=8)
    renewal_threshold: timedelta = timedelta(minutes=30)
    max_concurrent_sessions: int = 3
    require_secure: bool = False
    same_site: SameSiteMode = SameSiteMode.STRICT
    ip_mismatch_policy: IpMismatchPolicy = IpMismatchPolicy.WARN
    store_timeout: timedelta = timedelta(seconds=5)
    mirror_to_cache: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Raises:
            ValueError: If configuration is invalid.
        """
        if self.max_age <= timedelta(0):
            raise ValueError("max_age must be positive")
        if self.renewal_threshold < timedelta(0):
            raise ValueError("renewal_threshold must not be negative")
        if self.renewal_threshold >= self.max_age:
            raise ValueError("renewal_threshold must be shorter than max_age")
        if self.max_concurrent_sessions < 1:
            raise ValueError("max_concurrent_sessions must be at least 1")
        if self.store_timeout <= timedelta(0):
            raise ValueError("store_timeout must be positive")
        if self.same_site is SameSiteMode.NONE and not self.require_secure:
            raise ValueError("same_site=none requires require_secure")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SessionConfig":
        """Build configuration from application settings."""
        return cls(
            max_age=timedelta(seconds=settings.session_max_age_seconds),
            renewal_threshold=timedelta(
                seconds=settings.session_renewal_threshold_seconds
            ),
            max_concurrent_sessions=settings.session_max_concurrent,
            require_secure=settings.session_cookie_secure,
            same_site=SameSiteMode(settings.session_same_site),
            ip_mismatch_policy=IpMismatchPolicy(settings.session_ip_mismatch_policy),
            store_timeout=timedelta(seconds=settings.session_store_timeout_seconds),
            mirror_to_cache=settings.session_mirror_to_cache,
        )
