"""Domain entities."""

from src.domain.entities.user_session import UserSession

__all__ = ["UserSession"]
