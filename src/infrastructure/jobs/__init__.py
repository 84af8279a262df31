"""Background jobs for the session core.

Usage:
    from src.core.container import get_cleanup_scheduler

    scheduler = get_cleanup_scheduler()
    scheduler.start()
"""

from src.infrastructure.jobs.session_cleanup import SessionCleanupScheduler

__all__ = ["SessionCleanupScheduler"]
