"""Application services."""

from src.application.services.session_config import SessionConfig
from src.application.services.session_manager import SessionManager

__all__ = [
    "SessionConfig",
    "SessionManager",
]
