"""HTTP routers.

- system_router: health check and cache statistics
- sessions_router: current user's sessions and logout
"""

from src.presentation.routers.sessions import router as sessions_router
from src.presentation.routers.system import system_router

__all__ = ["sessions_router", "system_router"]
