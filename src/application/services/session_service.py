"""Session service.

Facade over the session lifecycle: create, validate, refresh, destroy,
list and count sessions, and restore sessions from remember-me tokens.

Flow of a request:
1. Session id arrives from the presentation layer (header or cookie)
2. validate_session() fetches the record and runs the ordered checks
3. refresh_session() explicitly extends a valid session
4. destroy_session() / destroy_all_user_sessions() end sessions

Validation never extends a session; keeping a session alive is always an
explicit refresh. Every rejection is reported to the caller with the same
public message while the specific reason is logged.

Architecture:
- Application layer; storage is reached through SessionStoreProtocol
- Verdicts are values inside Success; only storage faults are Failure
- Invalid arguments (empty user, non-positive max age) raise ValueError
"""

import re
import secrets
from datetime import timedelta

from src.application.dtos import (
    CreatedSession,
    SessionOptions,
    SessionRefresh,
    SessionStats,
    SessionValidation,
    SessionView,
    TokenRefresh,
)
from src.application.services.remember_me_service import RememberMeTokenManager
from src.core.fingerprinting import format_device_info, generate_device_fingerprint
from src.core.result import Failure, Result, Success
from src.domain.entities import Session
from src.domain.enums import SessionVerdict
from src.domain.errors import StorageUnavailableError
from src.domain.protocols import ClockProtocol, LoggerProtocol, SessionStoreProtocol
from src.domain.validators import SessionValidator
from src.domain.value_objects import RequestContext, SessionPolicy

SESSION_ID_PATTERN = re.compile(r"^[0-9a-f]{64}$")

_MILLISECOND = timedelta(milliseconds=1)


def is_well_formed_session_id(session_id: str) -> bool:
    """Whether a value looks like an issued session id (64 lowercase hex)."""
    return bool(SESSION_ID_PATTERN.fullmatch(session_id))


class SessionService:
    """Session lifecycle operations.

    Attributes:
        _store: Two-tier session store.
        _remember_me: Remember-me token manager.
        _validator: Ordered session checks.
        _policy: Lifetimes and validation switches.
    """

    def __init__(
        self,
        store: SessionStoreProtocol,
        *,
        remember_me: RememberMeTokenManager,
        validator: SessionValidator,
        policy: SessionPolicy,
        clock: ClockProtocol,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize the service.

        Args:
            store: Two-tier session store.
            remember_me: Remember-me token manager.
            validator: Ordered session checks.
            policy: Lifetimes and validation switches.
            clock: Time source.
            logger: Structured logger.
        """
        self._store = store
        self._remember_me = remember_me
        self._validator = validator
        self._policy = policy
        self._clock = clock
        self._logger = logger.bind(component="session_service")

    async def create_session(
        self,
        user_id: str,
        context: RequestContext,
        options: SessionOptions | None = None,
    ) -> Result[CreatedSession, StorageUnavailableError]:
        """Create a session for an authenticated user.

        Args:
            user_id: Authenticated user.
            context: Request the session is created for.
            options: Login type, remember-me and lifetime options.

        Returns:
            Success(CreatedSession) or Failure(StorageUnavailableError).
            When a remember-me token was requested but could not be stored,
            the new session is removed again and the failure is returned.

        Raises:
            ValueError: If user_id is empty or max_age_ms is not positive.
        """
        options = options or SessionOptions()
        if not user_id:
            raise ValueError("user_id must not be empty")

        max_age_ms = (
            options.max_age_ms
            if options.max_age_ms is not None
            else self._policy.max_age_for(remember_me=options.remember_me)
        )
        if max_age_ms <= 0:
            raise ValueError("max_age_ms must be positive")

        now = self._clock.now()
        session = Session(
            session_id=secrets.token_hex(32),
            user_id=user_id,
            created_at=now,
            last_activity=now,
            expires_at=now + max_age_ms * _MILLISECOND,
            max_age_ms=max_age_ms,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            device_fingerprint=generate_device_fingerprint(context),
            login_type=options.login_type,
            persistent=options.remember_me,
        )

        stored = await self._store.put(session)
        if isinstance(stored, Failure):
            return stored

        remember_me_token: str | None = None
        if options.wants_remember_token:
            issued = await self._remember_me.issue(user_id, context)
            if isinstance(issued, Failure):
                await self._store.delete(session.session_id)
                return issued
            remember_me_token = issued.value.token

        self._logger.info(
            "Session created",
            user_id=user_id,
            session=session.session_id[:8],
            login_type=session.login_type.value,
            persistent=session.persistent,
            max_age_ms=max_age_ms,
        )
        return Success(
            value=CreatedSession(
                session_id=session.session_id,
                expires_at=session.expires_at,
                max_age_ms=max_age_ms,
                persistent=session.persistent,
                remember_me_token=remember_me_token,
            )
        )

    async def validate_session(
        self, session_id: str, context: RequestContext
    ) -> Result[SessionValidation, StorageUnavailableError]:
        """Check whether a session may serve the current request.

        Does not extend the session. Expired sessions are deleted; sessions
        failing an IP, user-agent or device check are deleted when the
        policy says so.

        Returns:
            Success(SessionValidation) or Failure(StorageUnavailableError).
        """
        if not is_well_formed_session_id(session_id):
            self._logger.warning(
                "Session rejected",
                reason=SessionVerdict.NOT_FOUND_OR_EXPIRED.value,
                malformed=True,
            )
            return Success(
                value=SessionValidation(
                    valid=False, reason=SessionVerdict.NOT_FOUND_OR_EXPIRED
                )
            )

        found = await self._store.get(session_id)
        if isinstance(found, Failure):
            return found

        session = found.value
        verdict = self._validator.check(session, context, self._clock.now())
        if verdict.is_valid and session is not None:
            return Success(
                value=SessionValidation(
                    valid=True, reason=verdict, user_id=session.user_id, session=session
                )
            )

        await self._reject(session_id, session, verdict)
        return Success(value=SessionValidation(valid=False, reason=verdict))

    async def _reject(
        self, session_id: str, session: Session | None, verdict: SessionVerdict
    ) -> None:
        """Log a rejection and delete the record when required."""
        self._logger.warning(
            "Session rejected",
            session=session_id[:8],
            user_id=session.user_id if session else None,
            reason=verdict.value,
            error_code=verdict.error_code.value if verdict.error_code else None,
        )
        if session is None:
            return

        remove = verdict is SessionVerdict.NOT_FOUND_OR_EXPIRED or (
            verdict.is_security_failure and self._policy.destroy_on_security_failure
        )
        if not remove:
            return

        deleted = await self._store.delete(session_id)
        if isinstance(deleted, Failure):
            self._logger.warning(
                "Failed to delete rejected session",
                session=session_id[:8],
                reason=verdict.value,
            )

    async def refresh_session(
        self,
        session_id: str,
        context: RequestContext,
        max_age_ms: int | None = None,
    ) -> Result[SessionRefresh, StorageUnavailableError]:
        """Validate a session and extend its expiry.

        The new expiry is ``max(current expiry, now + max_age)``, so a
        refresh never shortens a session. The stored max age becomes the
        remaining lifetime, keeping ``expires_at == last_activity + max_age``.

        Args:
            session_id: Session to refresh.
            context: Current request (validated like validate_session).
            max_age_ms: Lifetime to grant; defaults to the session's own.

        Returns:
            Success(SessionRefresh) or Failure(StorageUnavailableError).

        Raises:
            ValueError: If max_age_ms is not positive.
        """
        if max_age_ms is not None and max_age_ms <= 0:
            raise ValueError("max_age_ms must be positive")

        validated = await self.validate_session(session_id, context)
        if isinstance(validated, Failure):
            return validated

        validation = validated.value
        if not validation.valid or validation.session is None:
            return Success(
                value=SessionRefresh(
                    refreshed=False, session_id=session_id, reason=validation.reason
                )
            )

        session = validation.session
        now = self._clock.now()
        requested = max_age_ms if max_age_ms is not None else session.max_age_ms
        expires_at = max(session.expires_at, now + requested * _MILLISECOND)
        stored_max_age = (expires_at - now) // _MILLISECOND

        touched = await self._store.touch(
            session_id,
            last_activity=now,
            expires_at=expires_at,
            max_age_ms=stored_max_age,
        )
        if isinstance(touched, Failure):
            return touched
        if touched.value is None:
            # Destroyed between validation and the update.
            return Success(
                value=SessionRefresh(
                    refreshed=False,
                    session_id=session_id,
                    reason=SessionVerdict.NOT_FOUND_OR_EXPIRED,
                )
            )

        self._logger.info(
            "Session refreshed",
            user_id=session.user_id,
            session=session_id[:8],
            expires_at=expires_at.isoformat(),
        )
        return Success(
            value=SessionRefresh(
                refreshed=True,
                session_id=session_id,
                reason=SessionVerdict.VALID,
                expires_at=expires_at,
                max_age_ms=stored_max_age,
            )
        )

    async def destroy_session(
        self, session_id: str, *, reason: str = "logout"
    ) -> Result[bool, StorageUnavailableError]:
        """End a session. Idempotent.

        Args:
            session_id: Session to end.
            reason: Recorded in the audit log line, e.g. "logout" or
                "security_revocation".

        Returns:
            Success(True) if the session existed, Success(False) otherwise.
        """
        if not is_well_formed_session_id(session_id):
            return Success(value=False)

        deleted = await self._store.delete(session_id)
        if isinstance(deleted, Success):
            self._logger.info(
                "Session destroyed",
                session=session_id[:8],
                existed=deleted.value,
                reason=reason,
            )
        return deleted

    async def destroy_all_user_sessions(
        self, user_id: str, except_session_id: str | None = None
    ) -> Result[int, StorageUnavailableError]:
        """End every session of a user, optionally keeping the current one.

        Returns:
            Success(number of sessions destroyed).
        """
        deleted = await self._store.delete_all_by_user(
            user_id, except_session_id=except_session_id
        )
        if isinstance(deleted, Success):
            self._logger.info(
                "All user sessions destroyed",
                user_id=user_id,
                kept=except_session_id[:8] if except_session_id else None,
                count=deleted.value,
            )
        return deleted

    async def get_user_sessions(
        self,
        user_id: str,
        current_session_id: str | None = None,
        include_expired: bool = False,
    ) -> Result[list[SessionView], StorageUnavailableError]:
        """List a user's sessions, newest first.

        Args:
            user_id: Owner.
            current_session_id: Session making the request (flagged isCurrent).
            include_expired: Also list expired-but-not-reaped sessions.

        Returns:
            Success(list of SessionView) or Failure(StorageUnavailableError).
        """
        listed = await self._store.list_by_user(user_id)
        if isinstance(listed, Failure):
            return listed

        now = self._clock.now()
        views = [
            SessionView(
                session_id=session.session_id,
                user_id=session.user_id,
                created_at=session.created_at,
                last_activity=session.last_activity,
                expires_at=session.expires_at,
                ip=session.ip_address or None,
                user_agent=session.user_agent or None,
                login_type=session.login_type,
                is_current=session.session_id == current_session_id,
                is_active=session.is_active(now),
                device=format_device_info(session.user_agent),
            )
            for session in listed.value
            if include_expired or session.is_active(now)
        ]
        return Success(value=views)

    async def get_session_stats(self) -> Result[SessionStats, StorageUnavailableError]:
        """Aggregate counts plus a live cache health probe."""
        cache_available = await self._store.check_cache()
        counted = await self._store.count()
        if isinstance(counted, Failure):
            return counted

        counts = counted.value
        return Success(
            value=SessionStats(
                total_sessions=counts.total,
                active_sessions=counts.active,
                expired_sessions=counts.expired,
                cache_tier_available=cache_available,
            )
        )

    async def refresh_from_token(
        self, token: str, context: RequestContext
    ) -> Result[TokenRefresh, StorageUnavailableError]:
        """Open a new persistent session from a remember-me token."""
        return await self._remember_me.refresh_from_token(token, context, sessions=self)
