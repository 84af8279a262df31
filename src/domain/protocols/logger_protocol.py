"""LoggerProtocol definition for structured logging.

Standardizes structured logging across the session core while remaining
backend-agnostic. Implementations MUST keep logs structured (message plus
key-value context).

Log Levels:
    - DEBUG: Cache hits/misses, diagnostic detail
    - INFO: Session created/refreshed/destroyed, cleanup reports
    - WARNING: Rejected sessions, cache outages (degraded service)
    - ERROR: Storage failures surfaced to callers
    - CRITICAL: System-wide failure

Security:
    - NEVER log full session ids or remember-me tokens (8-char prefix only)

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.info("Session created", user_id=user_id, session=session_id[:8])

    scoped = logger.bind(component="session_cleanup")
    scoped.info("Sweep finished", cleaned=3)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementations may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for system-wide failures."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with context bound to every future log.

        Args:
            **context: Context to bind (component, job, request id).

        Returns:
            New logger instance with bound context.
        """
        ...
