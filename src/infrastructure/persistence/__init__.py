"""Database persistence infrastructure.

- base.py: declarative BaseModel
- database.py: async engine and session factory
- models/: table models
- stores/: SessionStoreProtocol implementations
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]
