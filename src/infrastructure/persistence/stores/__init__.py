"""Session store implementations."""

from src.infrastructure.persistence.stores.memory_session_store import (
    InMemorySessionStore,
)
from src.infrastructure.persistence.stores.sqlalchemy_session_store import (
    SQLAlchemySessionStore,
)

__all__ = [
    "InMemorySessionStore",
    "SQLAlchemySessionStore",
]
