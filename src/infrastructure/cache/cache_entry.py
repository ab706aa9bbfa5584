"""Cache entry envelope.

Every cached value is stored as one JSON document wrapping the payload with
bookkeeping fields:

    {"data": <payload>, "timestamp": 1734000000000, "ttl": 3600, "hits": 0}

``expire_at`` is present only for entries written with an absolute deadline
(``set_expire_at``); reads then keep the deadline instead of re-arming the
relative TTL.
"""

import json
import time
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, kw_only=True)
class CacheEntry:
    """Envelope around a cached JSON payload.

    Attributes:
        data: The cached value (any JSON, including null).
        timestamp: Write time in epoch milliseconds.
        ttl: Relative lifetime in seconds (> 0).
        hits: Best-effort read counter (read-modify-write, not atomic).
        expire_at: Absolute deadline in epoch seconds, if any.
    """

    data: Any
    timestamp: int
    ttl: int
    hits: int = 0
    expire_at: int | None = None

    @classmethod
    def create(cls, data: Any, ttl: int, expire_at: int | None = None) -> "CacheEntry":
        """Build a fresh entry stamped with the current time."""
        return cls(
            data=data,
            timestamp=int(time.time() * 1000),
            ttl=ttl,
            expire_at=expire_at,
        )

    def to_json(self) -> str:
        """Serialize to the stored JSON document.

        Raises:
            TypeError: If ``data`` is not JSON-serializable.
        """
        document: dict[str, Any] = {
            "data": self.data,
            "timestamp": self.timestamp,
            "ttl": self.ttl,
            "hits": self.hits,
        }
        if self.expire_at is not None:
            document["expire_at"] = self.expire_at
        return json.dumps(document, separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str | bytes) -> "CacheEntry | None":
        """Parse a stored document.

        Returns:
            The entry, or None when the document is malformed (callers treat
            that as a miss).
        """
        try:
            document = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
            return None
        if not isinstance(document, dict) or "data" not in document:
            return None
        try:
            ttl = int(document["ttl"])
            timestamp = int(document.get("timestamp", 0))
            hits = int(document.get("hits", 0))
            expire_at = document.get("expire_at")
            expire_at = int(expire_at) if expire_at is not None else None
        except (KeyError, TypeError, ValueError):
            return None
        if ttl <= 0:
            return None
        return cls(
            data=document["data"],
            timestamp=timestamp,
            ttl=ttl,
            hits=hits,
            expire_at=expire_at,
        )
