"""UserSession domain entity.

Pure business logic, no framework dependencies.

A UserSession is one authenticated browser/client session of a user inside a
tenant. The session manager is the only component that changes
``is_active`` and ``expires_at``; the store persists what it is told.

Lifecycle:
    1. Created on successful authentication (active, expires at now + max_age)
    2. Accessed on every validated request (last_accessed_at moves, expiry
       may slide forward)
    3. Invalidated on logout, concurrency-cap eviction or expiry
       (active -> inactive, one way)
    4. Physically removed by the periodic cleanup sweep once expired or
       inactive
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class UserSession:
    """Authenticated session entity.

    Business Rules:
        - expires_at is always after created_at
        - is_active only moves from True to False
        - an inactive or expired session is never valid

    Attributes:
        id: Opaque, unguessable session token.
        user_id: User who owns this session.
        tenant_id: Tenant the session was opened in.
        created_at: When the session was created.
        last_accessed_at: Last validated access.
        expires_at: Hard expiry (slides forward on renewal).
        ip_address: Client IP observed at creation.
        user_agent: Client user agent string.
        is_active: False once invalidated.
        invalidated_at: When the session was invalidated.
        metadata: Free-form JSON context supplied at login.

    Example:
        >>> now = datetime.now(UTC)
        >>> session = UserSession(
        ...     id="tok",
        ...     user_id=uuid7(),
        ...     tenant_id=uuid7(),
        ...     created_at=now,
        ...     last_accessed_at=now,
        ...     expires_at=now + timedelta(hours=8),
        ... )
        >>> session.is_expired(now)
        False
    """

    id: str
    user_id: UUID
    tenant_id: UUID
    created_at: datetime
    last_accessed_at: datetime
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    is_active: bool = True
    invalidated_at: datetime | None = None
    metadata: dict[str, Any] | None = field(default=None)

    def __post_init__(self) -> None:
        """Enforce the expiry invariant.

        Raises:
            ValueError: If expires_at is not after created_at.
        """
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be after created_at")

    def is_expired(self, now: datetime) -> bool:
        """True once ``now`` is past the expiry."""
        return now > self.expires_at

    def time_to_expiry(self, now: datetime) -> timedelta:
        """Remaining lifetime (negative once expired)."""
        return self.expires_at - now

    def needs_renewal(self, now: datetime, threshold: timedelta) -> bool:
        """True when the remaining lifetime has dropped below ``threshold``."""
        return self.time_to_expiry(now) < threshold

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (ISO timestamps, string UUIDs)."""
        return {
            "id": self.id,
            "user_id": str(self.user_id),
            "tenant_id": str(self.tenant_id),
            "created_at": self.created_at.isoformat(),
            "last_accessed_at": self.last_accessed_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "is_active": self.is_active,
            "invalidated_at": (
                self.invalidated_at.isoformat() if self.invalidated_at else None
            ),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserSession":
        """Rebuild a session from ``to_dict`` output.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a timestamp or UUID is malformed.
        """
        invalidated_at = data.get("invalidated_at")
        return cls(
            id=data["id"],
            user_id=UUID(data["user_id"]),
            tenant_id=UUID(data["tenant_id"]),
            created_at=_as_utc(datetime.fromisoformat(data["created_at"])),
            last_accessed_at=_as_utc(datetime.fromisoformat(data["last_accessed_at"])),
            expires_at=_as_utc(datetime.fromisoformat(data["expires_at"])),
            ip_address=data.get("ip_address"),
            user_agent=data.get("user_agent"),
            is_active=bool(data.get("is_active", True)),
            invalidated_at=(
                _as_utc(datetime.fromisoformat(invalidated_at))
                if invalidated_at
                else None
            ),
            metadata=data.get("metadata"),
        )


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
