"""Background jobs."""

from src.infrastructure.jobs.session_cleanup import SessionCleanupJob

__all__ = ["SessionCleanupJob"]
