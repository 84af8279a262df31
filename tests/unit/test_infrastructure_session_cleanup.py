"""Unit tests for SessionCleanupScheduler."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.errors import StorageUnavailableError
from src.domain.value_objects import CleanupReport
from src.infrastructure.jobs import SessionCleanupScheduler


@pytest.fixture
def mock_store():
    store = AsyncMock()
    store.purge_expired.return_value = Success(
        value=CleanupReport(sessions_removed=3, tokens_removed=1, index_entries_pruned=2)
    )
    return store


@pytest.mark.unit
class TestRunOnce:
    """Test a single sweep."""

    async def test_reports_counts(self, mock_store, mock_logger):
        scheduler = SessionCleanupScheduler(mock_store, logger=mock_logger)

        result = await scheduler.run_once()

        assert isinstance(result, Success)
        assert result.value.cleaned_count == 4
        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.kwargs["cleaned"] == 4

    async def test_failure_is_logged_and_returned(self, mock_store, mock_logger):
        mock_store.purge_expired.return_value = Failure(
            error=StorageUnavailableError(
                code=ErrorCode.STORAGE_UNAVAILABLE,
                message="Session storage unavailable",
                operation="purge_expired",
            )
        )
        scheduler = SessionCleanupScheduler(mock_store, logger=mock_logger)

        result = await scheduler.run_once()

        assert isinstance(result, Failure)
        mock_logger.warning.assert_called_once()

    @pytest.mark.parametrize("interval", [0, -1.0])
    def test_non_positive_interval_raises(self, mock_store, mock_logger, interval):
        with pytest.raises(ValueError):
            SessionCleanupScheduler(mock_store, interval_seconds=interval, logger=mock_logger)


@pytest.mark.unit
class TestBackgroundLoop:
    """Test start/stop of the background task."""

    async def test_start_runs_sweeps_until_stopped(self, mock_store, mock_logger):
        # Arrange
        scheduler = SessionCleanupScheduler(
            mock_store, interval_seconds=0.01, logger=mock_logger
        )

        # Act
        scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        # Assert
        assert scheduler.running is False
        assert mock_store.purge_expired.await_count >= 2

    async def test_start_twice_keeps_one_task(self, mock_store, mock_logger):
        scheduler = SessionCleanupScheduler(mock_store, interval_seconds=60, logger=mock_logger)

        scheduler.start()
        first = scheduler._task
        scheduler.start()

        assert scheduler._task is first
        assert scheduler.running is True
        await scheduler.stop()

    async def test_stop_without_start(self, mock_store, mock_logger):
        scheduler = SessionCleanupScheduler(mock_store, logger=mock_logger)

        await scheduler.stop()

        assert scheduler.running is False

    async def test_crashing_sweep_does_not_end_loop(self, mock_store, mock_logger):
        """An unexpected exception is logged and the next sweep still runs."""
        # Arrange
        calls = []

        async def purge():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return Success(value=CleanupReport())

        mock_store.purge_expired.side_effect = purge
        scheduler = SessionCleanupScheduler(
            mock_store, interval_seconds=0.01, logger=mock_logger
        )

        # Act
        scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        # Assert
        mock_logger.error.assert_called()
        assert mock_store.purge_expired.await_count >= 2
