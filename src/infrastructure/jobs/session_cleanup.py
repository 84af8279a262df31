"""Periodic removal of expired sessions and remember-me tokens.

Redis drops expired records on its own through their TTLs; the durable
tier and the per-user index sets need an explicit sweep. The scheduler
calls SessionStoreProtocol.purge_expired() on a fixed interval from a
background asyncio task.

Sweeps take no locks and every deletion is idempotent, so overlapping
sweeps (several processes, or a manual run_once during the loop) are safe.

Usage:
    from src.core.container import get_cleanup_scheduler

    scheduler = get_cleanup_scheduler()
    scheduler.start()
    ...
    await scheduler.stop()
"""

import asyncio

from src.core.result import Failure, Result, Success
from src.domain.errors import StorageUnavailableError
from src.domain.protocols import LoggerProtocol, SessionStoreProtocol
from src.domain.value_objects import CleanupReport

DEFAULT_INTERVAL_SECONDS = 300.0


class SessionCleanupScheduler:
    """Runs expired-record sweeps on an interval.

    Attributes:
        _store: Session store to sweep.
        _interval: Seconds between the end of one sweep and the next.
        _task: Background loop, None when stopped.
    """

    def __init__(
        self,
        store: SessionStoreProtocol,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize the scheduler.

        Args:
            store: Session store to sweep.
            interval_seconds: Seconds between sweeps.
            logger: Structured logger.

        Raises:
            ValueError: If interval_seconds is not positive.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._interval = interval_seconds
        self._logger = logger.bind(component="session_cleanup")
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        """Whether the background loop is active."""
        return self._task is not None and not self._task.done()

    async def run_once(self) -> Result[CleanupReport, StorageUnavailableError]:
        """Run a single sweep.

        Returns:
            Success(CleanupReport) or Failure(StorageUnavailableError).
        """
        result = await self._store.purge_expired()

        match result:
            case Success(value=report):
                self._logger.info(
                    "Expired sessions cleaned up",
                    cleaned=report.cleaned_count,
                    sessions_removed=report.sessions_removed,
                    tokens_removed=report.tokens_removed,
                    index_entries_pruned=report.index_entries_pruned,
                )
            case Failure(error=err):
                self._logger.warning(
                    "Session cleanup sweep failed",
                    operation=err.operation,
                    error_message=err.message,
                )
        return result

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                self._logger.error("Session cleanup sweep crashed", error=exc)
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start the background loop. No-op when already running.

        Must be called from within a running event loop.
        """
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="session-cleanup")
        self._logger.info("Session cleanup started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._logger.info("Session cleanup stopped")
