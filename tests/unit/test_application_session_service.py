"""Unit tests for SessionService.

Tests cover:
- Session creation (ids, lifetimes, remember-me token issue and rollback)
- Validation with deletion of rejected sessions
- Refresh monotonicity and argument checks
- Destroy, listing and stats
- Storage faults passed through as Failure

The store is an AsyncMock; integration tests exercise the real tiers.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from src.application.dtos import SessionOptions
from src.application.services import (
    RememberMeTokenManager,
    SessionService,
    is_well_formed_session_id,
)
from src.core.enums import ErrorCode
from src.core.fingerprinting import generate_device_fingerprint
from src.core.result import Failure, Success
from src.domain.enums import LoginType, SessionVerdict
from src.domain.errors import StorageUnavailableError
from src.domain.validators import SessionValidator
from src.domain.value_objects import SessionCounts, SessionPolicy
from tests.utils.utils import DAY_MS, FIREFOX_UA, START, make_context, make_session


def storage_failure(operation: str = "get") -> Failure[StorageUnavailableError]:
    return Failure(
        error=StorageUnavailableError(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message="Session storage unavailable",
            operation=operation,
        )
    )


@pytest.fixture
def mock_store():
    """AsyncMock store whose writes succeed by default."""
    store = AsyncMock()
    store.put.return_value = Success(value=None)
    store.put_token.return_value = Success(value=None)
    store.delete.return_value = Success(value=True)
    store.get.return_value = Success(value=None)
    return store


@pytest.fixture
def service_factory(mock_store, clock, mock_logger):
    """Build a SessionService over the mock store with a given policy."""

    def factory(policy: SessionPolicy | None = None) -> SessionService:
        policy = policy or SessionPolicy()
        manager = RememberMeTokenManager(
            mock_store, policy=policy, clock=clock, logger=mock_logger
        )
        return SessionService(
            mock_store,
            remember_me=manager,
            validator=SessionValidator(policy),
            policy=policy,
            clock=clock,
            logger=mock_logger,
        )

    return factory


@pytest.fixture
def service(service_factory):
    return service_factory()


@pytest.mark.unit
class TestCreateSession:
    """Test create_session."""

    async def test_creates_standard_session(self, service, mock_store):
        """Default options create a 24h session with no token."""
        # Arrange
        context = make_context()

        # Act
        result = await service.create_session("user-1", context)

        # Assert
        assert isinstance(result, Success)
        created = result.value
        assert is_well_formed_session_id(created.session_id)
        assert created.max_age_ms == DAY_MS
        assert created.expires_at == START + timedelta(days=1)
        assert created.persistent is False
        assert created.remember_me_token is None

        stored = mock_store.put.await_args.args[0]
        assert stored.user_id == "user-1"
        assert stored.ip_address == context.ip_address
        assert stored.user_agent == context.user_agent
        assert stored.device_fingerprint == generate_device_fingerprint(context)
        assert stored.login_type is LoginType.PASSWORD
        mock_store.put_token.assert_not_awaited()

    async def test_session_ids_are_unique(self, service):
        """Ids never repeat and are always 64 lowercase hex characters."""
        count = 5000
        ids = set()
        for _ in range(count):
            result = await service.create_session("user-1", make_context())
            ids.add(result.value.session_id)

        assert len(ids) == count
        assert all(is_well_formed_session_id(session_id) for session_id in ids)

    async def test_remember_me_creates_seven_day_session_and_token(
        self, service, mock_store
    ):
        """remember_me issues a token bound to the requesting device."""
        # Arrange
        context = make_context()

        # Act
        result = await service.create_session(
            "user-1", context, SessionOptions(remember_me=True)
        )

        # Assert
        created = result.value
        assert created.persistent is True
        assert created.max_age_ms == 7 * DAY_MS
        assert created.remember_me_token is not None
        assert len(created.remember_me_token) == 64

        record = mock_store.put_token.await_args.args[0]
        assert record.user_id == "user-1"
        assert record.token_hash != created.remember_me_token
        assert record.device_fingerprint == generate_device_fingerprint(context)
        assert record.expires_at == START + timedelta(days=30)

    async def test_remember_me_without_token(self, service, mock_store):
        result = await service.create_session(
            "user-1",
            make_context(),
            SessionOptions(remember_me=True, issue_remember_token=False),
        )

        assert result.value.persistent is True
        assert result.value.remember_me_token is None
        mock_store.put_token.assert_not_awaited()

    async def test_explicit_max_age_overrides_policy(self, service):
        result = await service.create_session(
            "user-1", make_context(), SessionOptions(max_age_ms=60_000)
        )

        assert result.value.max_age_ms == 60_000
        assert result.value.expires_at == START + timedelta(minutes=1)

    async def test_empty_user_raises(self, service):
        with pytest.raises(ValueError):
            await service.create_session("", make_context())

    @pytest.mark.parametrize("max_age_ms", [0, -1])
    async def test_non_positive_max_age_raises(self, service, max_age_ms):
        with pytest.raises(ValueError):
            await service.create_session(
                "user-1", make_context(), SessionOptions(max_age_ms=max_age_ms)
            )

    async def test_storage_failure_is_returned(self, service, mock_store):
        mock_store.put.return_value = storage_failure("put")

        result = await service.create_session("user-1", make_context())

        assert isinstance(result, Failure)
        assert result.error.operation == "put"

    async def test_token_failure_removes_new_session(self, service, mock_store):
        """A session whose requested token could not be stored is rolled back."""
        # Arrange
        mock_store.put_token.return_value = storage_failure("put_token")

        # Act
        result = await service.create_session(
            "user-1", make_context(), SessionOptions(remember_me=True)
        )

        # Assert
        assert isinstance(result, Failure)
        stored = mock_store.put.await_args.args[0]
        mock_store.delete.assert_awaited_once_with(stored.session_id)


@pytest.mark.unit
class TestValidateSession:
    """Test validate_session."""

    async def test_valid_session(self, service, mock_store):
        session = make_session()
        mock_store.get.return_value = Success(value=session)

        result = await service.validate_session(session.session_id, make_context())

        validation = result.value
        assert validation.valid is True
        assert validation.user_id == "user-1"
        assert validation.session is session
        assert validation.message is None
        mock_store.delete.assert_not_awaited()

    async def test_malformed_id_never_reaches_storage(self, service, mock_store):
        result = await service.validate_session("not-a-session", make_context())

        assert result.value.valid is False
        assert result.value.reason is SessionVerdict.NOT_FOUND_OR_EXPIRED
        mock_store.get.assert_not_awaited()

    async def test_unknown_session(self, service, mock_store):
        result = await service.validate_session("a" * 64, make_context())

        assert result.value.valid is False
        assert result.value.message == "Invalid or expired session"
        mock_store.delete.assert_not_awaited()

    async def test_expired_session_is_deleted(self, service, mock_store, clock):
        session = make_session(max_age_ms=1000)
        mock_store.get.return_value = Success(value=session)
        clock.advance(seconds=2)

        result = await service.validate_session(session.session_id, make_context())

        assert result.value.reason is SessionVerdict.NOT_FOUND_OR_EXPIRED
        mock_store.delete.assert_awaited_once_with(session.session_id)

    async def test_security_failure_deletes_session(self, service, mock_store):
        session = make_session()
        mock_store.get.return_value = Success(value=session)

        result = await service.validate_session(
            session.session_id, make_context(user_agent=FIREFOX_UA)
        )

        assert result.value.valid is False
        assert result.value.reason is SessionVerdict.USER_AGENT_MISMATCH
        assert result.value.user_id is None
        mock_store.delete.assert_awaited_once_with(session.session_id)

    async def test_security_failure_kept_when_policy_says_so(
        self, service_factory, mock_store
    ):
        service = service_factory(SessionPolicy(destroy_on_security_failure=False))
        session = make_session()
        mock_store.get.return_value = Success(value=session)

        result = await service.validate_session(
            session.session_id, make_context(ip_address="10.0.0.1")
        )

        assert result.value.reason is SessionVerdict.IP_MISMATCH
        mock_store.delete.assert_not_awaited()

    async def test_failed_delete_does_not_change_verdict(self, service, mock_store):
        session = make_session()
        mock_store.get.return_value = Success(value=session)
        mock_store.delete.return_value = storage_failure("delete")

        result = await service.validate_session(
            session.session_id, make_context(ip_address="10.0.0.1")
        )

        assert isinstance(result, Success)
        assert result.value.reason is SessionVerdict.IP_MISMATCH

    async def test_storage_failure_is_returned(self, service, mock_store):
        mock_store.get.return_value = storage_failure()

        result = await service.validate_session("a" * 64, make_context())

        assert isinstance(result, Failure)

    async def test_validation_does_not_extend_session(self, service, mock_store):
        session = make_session()
        mock_store.get.return_value = Success(value=session)

        await service.validate_session(session.session_id, make_context())

        mock_store.touch.assert_not_awaited()
        mock_store.put.assert_not_awaited()


@pytest.mark.unit
class TestRefreshSession:
    """Test refresh_session."""

    async def test_refresh_extends_from_now(self, service, mock_store, clock):
        """Refreshing mid-life moves expiry to now + max age."""
        # Arrange
        session = make_session(max_age_ms=DAY_MS)
        mock_store.get.return_value = Success(value=session)
        now = clock.advance(hours=6)
        mock_store.touch.return_value = Success(value=session)

        # Act
        result = await service.refresh_session(session.session_id, make_context())

        # Assert
        refresh = result.value
        assert refresh.refreshed is True
        assert refresh.expires_at == now + timedelta(days=1)
        assert refresh.max_age_ms == DAY_MS
        mock_store.touch.assert_awaited_once_with(
            session.session_id,
            last_activity=now,
            expires_at=now + timedelta(days=1),
            max_age_ms=DAY_MS,
        )

    async def test_refresh_never_shortens(self, service, mock_store, clock):
        """A shorter max age keeps the later expiry."""
        # Arrange
        session = make_session(max_age_ms=7 * DAY_MS)
        mock_store.get.return_value = Success(value=session)
        now = clock.advance(days=1)
        mock_store.touch.return_value = Success(value=session)

        # Act
        result = await service.refresh_session(
            session.session_id, make_context(), max_age_ms=60_000
        )

        # Assert
        refresh = result.value
        assert refresh.expires_at == session.expires_at
        assert refresh.max_age_ms == 6 * DAY_MS
        assert refresh.expires_at == now + timedelta(milliseconds=refresh.max_age_ms)

    async def test_invalid_session_is_not_refreshed(self, service, mock_store):
        result = await service.refresh_session("a" * 64, make_context())

        assert result.value.refreshed is False
        assert result.value.reason is SessionVerdict.NOT_FOUND_OR_EXPIRED
        mock_store.touch.assert_not_awaited()

    async def test_session_removed_before_touch(self, service, mock_store):
        session = make_session()
        mock_store.get.return_value = Success(value=session)
        mock_store.touch.return_value = Success(value=None)

        result = await service.refresh_session(session.session_id, make_context())

        assert result.value.refreshed is False
        assert result.value.reason is SessionVerdict.NOT_FOUND_OR_EXPIRED

    async def test_touch_failure_is_returned(self, service, mock_store):
        session = make_session()
        mock_store.get.return_value = Success(value=session)
        mock_store.touch.return_value = storage_failure("touch")

        result = await service.refresh_session(session.session_id, make_context())

        assert isinstance(result, Failure)

    @pytest.mark.parametrize("max_age_ms", [0, -5])
    async def test_non_positive_max_age_raises(self, service, max_age_ms):
        with pytest.raises(ValueError):
            await service.refresh_session("a" * 64, make_context(), max_age_ms=max_age_ms)


@pytest.mark.unit
class TestDestroyAndList:
    """Test destroy, listing and stats."""

    async def test_destroy_reports_existence(self, service, mock_store):
        mock_store.delete.return_value = Success(value=False)

        result = await service.destroy_session("a" * 64)

        assert result.value is False
        mock_store.delete.assert_awaited_once_with("a" * 64)

    async def test_destroy_logs_reason(self, service, mock_store, mock_logger):
        """The audit line tells a logout from a security revocation."""
        # Arrange
        mock_store.delete.return_value = Success(value=True)

        # Act
        await service.destroy_session("a" * 64)
        await service.destroy_session("b" * 64, reason="security_revocation")

        # Assert
        mock_logger.info.assert_any_call(
            "Session destroyed", session="aaaaaaaa", existed=True, reason="logout"
        )
        mock_logger.info.assert_any_call(
            "Session destroyed",
            session="bbbbbbbb",
            existed=True,
            reason="security_revocation",
        )

    async def test_destroy_malformed_id(self, service, mock_store):
        result = await service.destroy_session("../etc/passwd")

        assert result.value is False
        mock_store.delete.assert_not_awaited()

    async def test_destroy_all_passes_exception(self, service, mock_store):
        mock_store.delete_all_by_user.return_value = Success(value=3)

        result = await service.destroy_all_user_sessions("user-1", "b" * 64)

        assert result.value == 3
        mock_store.delete_all_by_user.assert_awaited_once_with(
            "user-1", except_session_id="b" * 64
        )

    async def test_get_user_sessions(self, service, mock_store, clock):
        """Expired sessions are hidden unless asked for; current is flagged."""
        # Arrange
        current = make_session(max_age_ms=DAY_MS)
        expired = make_session(max_age_ms=1000, ip_address="")
        mock_store.list_by_user.return_value = Success(value=[current, expired])
        clock.advance(seconds=5)

        # Act
        active_only = await service.get_user_sessions("user-1", current.session_id)
        everything = await service.get_user_sessions(
            "user-1", current.session_id, include_expired=True
        )

        # Assert
        assert [view.session_id for view in active_only.value] == [current.session_id]
        view = active_only.value[0]
        assert view.is_current is True
        assert view.is_active is True
        assert view.device == "Chrome on Windows"

        assert len(everything.value) == 2
        stale = everything.value[1]
        assert stale.is_active is False
        assert stale.is_current is False
        assert stale.ip is None

    async def test_get_session_stats(self, service, mock_store):
        mock_store.check_cache.return_value = False
        mock_store.count.return_value = Success(value=SessionCounts(total=5, active=3))

        result = await service.get_session_stats()

        stats = result.value
        assert stats.total_sessions == 5
        assert stats.active_sessions == 3
        assert stats.expired_sessions == 2
        assert stats.cache_tier_available is False

    async def test_get_session_stats_failure(self, service, mock_store):
        mock_store.check_cache.return_value = True
        mock_store.count.return_value = storage_failure("count")

        result = await service.get_session_stats()

        assert isinstance(result, Failure)
