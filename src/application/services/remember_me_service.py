"""Remember-me token manager.

Issues, validates and retires the long-lived tokens that let a returning
user get a fresh session without credentials.

Tokens are 256-bit random hex strings handed to the client once. Storage
keeps only their SHA-256 hash, bound to the device fingerprint of the
request that obtained them. A token is NOT consumed when exchanged for a
session: it stays valid until it expires or is disabled.

Architecture:
- Application layer; storage is reached through SessionStoreProtocol
- Session creation is delegated to a SessionCreator passed per call, which
  keeps this manager independent of SessionService
"""

import hashlib
import re
import secrets
from datetime import timedelta
from typing import Protocol

from src.application.dtos import (
    CreatedSession,
    IssuedRememberMeToken,
    SessionOptions,
    TokenRefresh,
    TokenValidation,
)
from src.core.fingerprinting import generate_device_fingerprint
from src.core.result import Failure, Result, Success
from src.domain.entities import RememberMeToken
from src.domain.enums import LoginType, TokenVerdict
from src.domain.errors import StorageUnavailableError
from src.domain.protocols import ClockProtocol, LoggerProtocol, SessionStoreProtocol
from src.domain.value_objects import RequestContext, SessionPolicy

TOKEN_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def hash_token(token: str) -> str:
    """SHA-256 hex digest under which a token is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionCreator(Protocol):
    """Anything that can open a session for a user (SessionService)."""

    async def create_session(
        self,
        user_id: str,
        context: RequestContext,
        options: SessionOptions | None = None,
    ) -> Result[CreatedSession, StorageUnavailableError]:
        """Create a session."""
        ...


class RememberMeTokenManager:
    """Lifecycle of remember-me tokens.

    Attributes:
        _store: Session store holding token records.
        _policy: Token lifetime and device binding switch.
    """

    def __init__(
        self,
        store: SessionStoreProtocol,
        *,
        policy: SessionPolicy,
        clock: ClockProtocol,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize the manager.

        Args:
            store: Session store holding token records.
            policy: Token lifetime and device binding switch.
            clock: Time source.
            logger: Structured logger.
        """
        self._store = store
        self._policy = policy
        self._clock = clock
        self._logger = logger.bind(component="remember_me")

    async def issue(
        self, user_id: str, context: RequestContext
    ) -> Result[IssuedRememberMeToken, StorageUnavailableError]:
        """Issue a new token bound to the requesting device.

        Args:
            user_id: Token owner.
            context: Request the token is issued to.

        Returns:
            Success(IssuedRememberMeToken) carrying the plaintext token, or
            Failure(StorageUnavailableError).

        Raises:
            ValueError: If user_id is empty.
        """
        if not user_id:
            raise ValueError("user_id must not be empty")

        token = secrets.token_hex(32)
        now = self._clock.now()
        record = RememberMeToken(
            token_hash=hash_token(token),
            user_id=user_id,
            device_fingerprint=generate_device_fingerprint(context),
            created_at=now,
            expires_at=now + timedelta(milliseconds=self._policy.remember_me_token_ttl_ms),
        )

        stored = await self._store.put_token(record)
        if isinstance(stored, Failure):
            return stored

        self._logger.info(
            "Remember-me token issued",
            user_id=user_id,
            token=token[:8],
            expires_at=record.expires_at.isoformat(),
        )
        return Success(
            value=IssuedRememberMeToken(token=token, expires_at=record.expires_at)
        )

    async def _lookup(
        self, token: str
    ) -> Result[tuple[TokenVerdict, RememberMeToken | None], StorageUnavailableError]:
        """Find the record behind a token and judge its expiry."""
        if not TOKEN_PATTERN.fullmatch(token):
            return Success(value=(TokenVerdict.INVALID_TOKEN, None))

        token_hash = hash_token(token)
        found = await self._store.get_token(token_hash)
        if isinstance(found, Failure):
            return found

        record = found.value
        if record is None:
            return Success(value=(TokenVerdict.INVALID_TOKEN, None))

        if record.is_expired(self._clock.now()):
            deleted = await self._store.delete_token(token_hash)
            if isinstance(deleted, Failure):
                self._logger.warning("Failed to delete expired token", token=token[:8])
            return Success(value=(TokenVerdict.TOKEN_EXPIRED, None))

        return Success(value=(TokenVerdict.VALID, record))

    def _log_rejection(self, token: str, verdict: TokenVerdict) -> None:
        self._logger.warning(
            "Remember-me token rejected",
            token=token[:8],
            reason=verdict.value,
            error_code=verdict.error_code.value if verdict.error_code else None,
        )

    async def validate(self, token: str) -> Result[TokenValidation, StorageUnavailableError]:
        """Check a token without creating a session.

        Expired tokens are deleted when seen. Malformed tokens never reach
        storage.

        Returns:
            Success(TokenValidation) or Failure(StorageUnavailableError).
        """
        looked_up = await self._lookup(token)
        if isinstance(looked_up, Failure):
            return looked_up

        verdict, record = looked_up.value
        if record is None:
            self._log_rejection(token, verdict)
            return Success(value=TokenValidation(valid=False, reason=verdict))

        return Success(
            value=TokenValidation(valid=True, reason=verdict, user_id=record.user_id)
        )

    async def refresh_from_token(
        self,
        token: str,
        context: RequestContext,
        *,
        sessions: SessionCreator,
    ) -> Result[TokenRefresh, StorageUnavailableError]:
        """Exchange a valid token for a new persistent session.

        The token is left in place, so replaying it yields another new
        session until it expires or is disabled.

        Args:
            token: Plaintext token presented by the client.
            context: Current request.
            sessions: Creator of the new session.

        Returns:
            Success(TokenRefresh) or Failure(StorageUnavailableError).
        """
        looked_up = await self._lookup(token)
        if isinstance(looked_up, Failure):
            return looked_up

        verdict, record = looked_up.value
        if (
            record is not None
            and self._policy.bind_remember_me_to_device
            and record.device_fingerprint != generate_device_fingerprint(context)
        ):
            verdict, record = TokenVerdict.DEVICE_MISMATCH, None

        if record is None:
            self._log_rejection(token, verdict)
            return Success(value=TokenRefresh(refreshed=False, reason=verdict))

        created = await sessions.create_session(
            record.user_id,
            context,
            SessionOptions(
                login_type=LoginType.REMEMBER_ME,
                remember_me=True,
                issue_remember_token=False,
            ),
        )
        if isinstance(created, Failure):
            return created

        self._logger.info(
            "Session restored from remember-me token",
            user_id=record.user_id,
            token=token[:8],
            session=created.value.session_id[:8],
        )
        return Success(
            value=TokenRefresh(
                refreshed=True, reason=TokenVerdict.VALID, session=created.value
            )
        )

    async def disable(self, token: str) -> Result[bool, StorageUnavailableError]:
        """Disable a token. Idempotent.

        Returns:
            Success(True) if the token existed, Success(False) otherwise.
        """
        if not TOKEN_PATTERN.fullmatch(token):
            return Success(value=False)

        deleted = await self._store.delete_token(hash_token(token))
        if isinstance(deleted, Success):
            self._logger.info(
                "Remember-me token disabled", token=token[:8], existed=deleted.value
            )
        return deleted

    async def disable_all(self, user_id: str) -> Result[int, StorageUnavailableError]:
        """Disable every token of a user (log out everywhere).

        Returns:
            Success(number of tokens disabled).
        """
        deleted = await self._store.delete_tokens_by_user(user_id)
        if isinstance(deleted, Success):
            self._logger.info(
                "All remember-me tokens disabled", user_id=user_id, count=deleted.value
            )
        return deleted
