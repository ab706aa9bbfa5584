"""Cache keys protocol for key generation.

The application layer builds cache keys through this port; the
infrastructure implementation is ``src/infrastructure/cache/cache_keys.py``.
Only the keys the application layer needs are declared here.
"""

from typing import Protocol


class CacheKeysProtocol(Protocol):
    """Protocol for generating cache keys.

    All keys follow ``{prefix}:{namespace}:...``.
    """

    @property
    def prefix(self) -> str:
        """Cache key prefix (typically "chc_insight")."""
        ...

    def user_session(self, session_id: str) -> str:
        """Session mirror key.

        Pattern: {prefix}:session:{session_id}
        """
        ...
