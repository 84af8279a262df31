"""Unit tests for RememberMeTokenManager."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from src.application.dtos import CreatedSession
from src.application.services import RememberMeTokenManager, hash_token
from src.core.enums import ErrorCode
from src.core.fingerprinting import generate_device_fingerprint
from src.core.result import Failure, Success
from src.domain.enums import LoginType, TokenVerdict
from src.domain.errors import StorageUnavailableError
from src.domain.value_objects import SessionPolicy
from tests.utils.utils import DAY_MS, FIREFOX_UA, START, make_context, make_token

TOKEN = "c" * 64


def storage_failure(operation: str) -> Failure[StorageUnavailableError]:
    return Failure(
        error=StorageUnavailableError(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message="Session storage unavailable",
            operation=operation,
        )
    )


@pytest.fixture
def mock_store():
    store = AsyncMock()
    store.put_token.return_value = Success(value=None)
    store.get_token.return_value = Success(value=None)
    store.delete_token.return_value = Success(value=True)
    return store


@pytest.fixture
def manager(mock_store, policy, clock, mock_logger):
    return RememberMeTokenManager(
        mock_store, policy=policy, clock=clock, logger=mock_logger
    )


@pytest.fixture
def sessions():
    """SessionCreator double returning a fixed session."""
    creator = AsyncMock()
    creator.create_session.return_value = Success(
        value=CreatedSession(
            session_id="d" * 64,
            expires_at=START + timedelta(days=7),
            max_age_ms=7 * DAY_MS,
            persistent=True,
        )
    )
    return creator


def stored_token(context=None, **kwargs):
    """Record stored under TOKEN for the given device."""
    context = context or make_context()
    return make_token(
        token_hash=hash_token(TOKEN),
        device_fingerprint=generate_device_fingerprint(context),
        **kwargs,
    )


@pytest.mark.unit
class TestIssue:
    """Test token issue."""

    async def test_issue_stores_only_hash(self, manager, mock_store):
        # Act
        result = await manager.issue("user-1", make_context())

        # Assert
        issued = result.value
        assert len(issued.token) == 64
        assert issued.expires_at == START + timedelta(days=30)
        record = mock_store.put_token.await_args.args[0]
        assert record.token_hash == hash_token(issued.token)
        assert record.token_hash != issued.token

    async def test_tokens_are_unique(self, manager):
        tokens = {(await manager.issue("user-1", make_context())).value.token for _ in range(20)}

        assert len(tokens) == 20

    async def test_empty_user_raises(self, manager):
        with pytest.raises(ValueError):
            await manager.issue("", make_context())

    async def test_storage_failure(self, manager, mock_store):
        mock_store.put_token.return_value = storage_failure("put_token")

        result = await manager.issue("user-1", make_context())

        assert isinstance(result, Failure)


@pytest.mark.unit
class TestValidate:
    """Test token validation."""

    async def test_valid_token(self, manager, mock_store):
        mock_store.get_token.return_value = Success(value=stored_token())

        result = await manager.validate(TOKEN)

        assert result.value.valid is True
        assert result.value.user_id == "user-1"
        assert result.value.message is None
        mock_store.get_token.assert_awaited_once_with(hash_token(TOKEN))

    async def test_unknown_token(self, manager):
        result = await manager.validate(TOKEN)

        assert result.value.valid is False
        assert result.value.reason is TokenVerdict.INVALID_TOKEN
        assert result.value.message == "Invalid or expired remember-me token"

    async def test_malformed_token_never_reaches_storage(self, manager, mock_store):
        result = await manager.validate("short")

        assert result.value.reason is TokenVerdict.INVALID_TOKEN
        mock_store.get_token.assert_not_awaited()

    async def test_expired_token_is_deleted(self, manager, mock_store, clock):
        mock_store.get_token.return_value = Success(value=stored_token(ttl_ms=1000))
        clock.advance(seconds=1)

        result = await manager.validate(TOKEN)

        assert result.value.reason is TokenVerdict.TOKEN_EXPIRED
        mock_store.delete_token.assert_awaited_once_with(hash_token(TOKEN))

    async def test_storage_failure(self, manager, mock_store):
        mock_store.get_token.return_value = storage_failure("get_token")

        result = await manager.validate(TOKEN)

        assert isinstance(result, Failure)


@pytest.mark.unit
class TestRefreshFromToken:
    """Test exchanging a token for a session."""

    async def test_creates_remember_me_session(self, manager, mock_store, sessions):
        """A valid token opens a persistent session and is not consumed."""
        # Arrange
        context = make_context()
        mock_store.get_token.return_value = Success(value=stored_token(context))

        # Act
        result = await manager.refresh_from_token(TOKEN, context, sessions=sessions)

        # Assert
        refresh = result.value
        assert refresh.refreshed is True
        assert refresh.session.session_id == "d" * 64
        user_id, passed_context, options = sessions.create_session.await_args.args
        assert user_id == "user-1"
        assert passed_context is context
        assert options.login_type is LoginType.REMEMBER_ME
        assert options.remember_me is True
        assert options.wants_remember_token is False
        mock_store.delete_token.assert_not_awaited()

    async def test_device_mismatch(self, manager, mock_store, sessions):
        mock_store.get_token.return_value = Success(value=stored_token())

        result = await manager.refresh_from_token(
            TOKEN, make_context(user_agent=FIREFOX_UA), sessions=sessions
        )

        assert result.value.refreshed is False
        assert result.value.reason is TokenVerdict.DEVICE_MISMATCH
        sessions.create_session.assert_not_awaited()
        mock_store.delete_token.assert_not_awaited()

    async def test_device_binding_can_be_disabled(
        self, mock_store, clock, mock_logger, sessions
    ):
        manager = RememberMeTokenManager(
            mock_store,
            policy=SessionPolicy(bind_remember_me_to_device=False),
            clock=clock,
            logger=mock_logger,
        )
        mock_store.get_token.return_value = Success(value=stored_token())

        result = await manager.refresh_from_token(
            TOKEN, make_context(user_agent=FIREFOX_UA), sessions=sessions
        )

        assert result.value.refreshed is True

    async def test_expired_token(self, manager, mock_store, sessions, clock):
        mock_store.get_token.return_value = Success(value=stored_token(ttl_ms=1000))
        clock.advance(minutes=1)

        result = await manager.refresh_from_token(TOKEN, make_context(), sessions=sessions)

        assert result.value.reason is TokenVerdict.TOKEN_EXPIRED
        assert result.value.message == "Invalid or expired remember-me token"
        sessions.create_session.assert_not_awaited()

    async def test_session_failure_is_returned(self, manager, mock_store, sessions):
        mock_store.get_token.return_value = Success(value=stored_token())
        sessions.create_session.return_value = storage_failure("put")

        result = await manager.refresh_from_token(TOKEN, make_context(), sessions=sessions)

        assert isinstance(result, Failure)


@pytest.mark.unit
class TestDisable:
    """Test disabling tokens."""

    async def test_disable(self, manager, mock_store):
        result = await manager.disable(TOKEN)

        assert result.value is True
        mock_store.delete_token.assert_awaited_once_with(hash_token(TOKEN))

    async def test_disable_malformed(self, manager, mock_store):
        result = await manager.disable("nope")

        assert result.value is False
        mock_store.delete_token.assert_not_awaited()

    async def test_disable_all(self, manager, mock_store):
        mock_store.delete_tokens_by_user.return_value = Success(value=2)

        result = await manager.disable_all("user-1")

        assert result.value == 2
        mock_store.delete_tokens_by_user.assert_awaited_once_with("user-1")
