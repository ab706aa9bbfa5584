"""LoggerProtocol definition for structured logging.

Every component that logs receives a LoggerProtocol through its constructor
(see ``src.core.container.get_logger``), so tests can pass a MagicMock and
production can swap the backend without touching callers.

Rules:
    - Message + key-value context, never f-string interpolation.
    - Never log session tokens in full, passwords or PHI.

Usage:
    logger.info("session_created", session_id=session_id[:8], user_id=str(user_id))

    scoped = logger.bind(component="session_cleanup")
    scoped.info("sweep_finished", deleted=3)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Five levels (DEBUG, INFO, WARNING, ERROR, CRITICAL) plus context
    binding for scoped loggers.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message (degraded but continuing)."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message.

        Args:
            message: Event name or short description.
            error: Optional exception; adapters add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message (system-wide failure)."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with ``context`` attached to every call.

        The original logger is unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
