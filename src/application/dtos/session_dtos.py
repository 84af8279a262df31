"""Session lifecycle DTOs (Data Transfer Objects).

Result dataclasses returned by SessionService and RememberMeTokenManager.
They carry data from the application layer to the presentation layer.

DTOs:
    - SessionOptions: Inputs to create_session
    - CreatedSession: Result of create_session
    - SessionValidation: Result of validate_session
    - SessionRefresh: Result of refresh_session
    - SessionView: One session as shown to its owner
    - SessionStats: Aggregate counts and cache health
    - IssuedRememberMeToken: Result of issuing a remember-me token
    - TokenValidation: Result of validating a remember-me token
    - TokenRefresh: Result of turning a remember-me token into a session
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.domain.entities import Session
from src.domain.enums import INVALID_TOKEN_MESSAGE, LoginType, SessionVerdict, TokenVerdict


@dataclass(frozen=True, kw_only=True)
class SessionOptions:
    """Options for creating a session.

    Attributes:
        login_type: How the user authenticated.
        remember_me: Create a persistent (7d) session.
        max_age_ms: Explicit lifetime, overriding the policy default.
        issue_remember_token: Also issue a remember-me token. Defaults to
            following remember_me.
    """

    login_type: LoginType = LoginType.PASSWORD
    remember_me: bool = False
    max_age_ms: int | None = None
    issue_remember_token: bool | None = None

    @property
    def wants_remember_token(self) -> bool:
        """Whether create_session should issue a remember-me token."""
        if self.issue_remember_token is None:
            return self.remember_me
        return self.issue_remember_token


@dataclass(frozen=True, kw_only=True)
class CreatedSession:
    """Response from successful session creation.

    Attributes:
        session_id: 64-hex session identifier (bearer credential).
        expires_at: Absolute expiry.
        max_age_ms: Lifetime granted.
        persistent: True for remember-me sessions.
        remember_me_token: Plaintext remember-me token, when one was issued.
    """

    session_id: str
    expires_at: datetime
    max_age_ms: int
    persistent: bool
    remember_me_token: str | None = None


@dataclass(frozen=True, kw_only=True)
class SessionValidation:
    """Outcome of validating a session.

    Attributes:
        valid: Whether the session may be used.
        user_id: Owner, only when valid.
        reason: Specific verdict (for logs and audit).
        session: The validated session, only when valid.
    """

    valid: bool
    reason: SessionVerdict
    user_id: str | None = None
    session: Session | None = None

    @property
    def message(self) -> str | None:
        """Public message (identical for every failure)."""
        return self.reason.public_message


@dataclass(frozen=True, kw_only=True)
class SessionRefresh:
    """Outcome of refreshing a session.

    Attributes:
        refreshed: Whether the expiry window moved.
        session_id: Refreshed session.
        reason: Verdict of the validation that preceded the refresh.
        expires_at: New expiry, only when refreshed.
        max_age_ms: New stored max age, only when refreshed.
    """

    refreshed: bool
    session_id: str
    reason: SessionVerdict
    expires_at: datetime | None = None
    max_age_ms: int | None = None


@dataclass(frozen=True, kw_only=True)
class SessionView:
    """A session as listed to its owner."""

    session_id: str
    user_id: str
    created_at: datetime
    last_activity: datetime
    expires_at: datetime
    ip: str | None
    user_agent: str | None
    login_type: LoginType
    is_current: bool
    is_active: bool
    device: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Dict with camelCase keys and ISO 8601 timestamps.
        """
        return {
            "sessionId": self.session_id,
            "userId": self.user_id,
            "createdAt": self.created_at.isoformat(),
            "lastActivity": self.last_activity.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
            "ip": self.ip,
            "userAgent": self.user_agent,
            "loginType": self.login_type.value,
            "isCurrent": self.is_current,
            "isActive": self.is_active,
            "device": self.device,
        }


@dataclass(frozen=True, kw_only=True)
class SessionStats:
    """Aggregate session counts.

    Attributes:
        total_sessions: Stored sessions, including expired-but-not-reaped.
        active_sessions: Sessions not yet expired.
        expired_sessions: Stored sessions past expiry.
        cache_tier_available: Whether the cache answered a PING.
    """

    total_sessions: int
    active_sessions: int
    expired_sessions: int
    cache_tier_available: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "totalSessions": self.total_sessions,
            "activeSessions": self.active_sessions,
            "expiredSessions": self.expired_sessions,
            "cacheTierAvailable": self.cache_tier_available,
        }


@dataclass(frozen=True, kw_only=True)
class IssuedRememberMeToken:
    """A freshly issued remember-me token.

    Attributes:
        token: Plaintext token (only ever held by the client).
        expires_at: Token expiry.
    """

    token: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class TokenValidation:
    """Outcome of validating a remember-me token."""

    valid: bool
    reason: TokenVerdict
    user_id: str | None = None

    @property
    def message(self) -> str | None:
        """Public message (identical for every failure)."""
        return None if self.valid else INVALID_TOKEN_MESSAGE


@dataclass(frozen=True, kw_only=True)
class TokenRefresh:
    """Outcome of exchanging a remember-me token for a new session.

    Attributes:
        refreshed: Whether a new session was created.
        reason: Token verdict.
        session: The new session, only when refreshed.
    """

    refreshed: bool
    reason: TokenVerdict
    session: CreatedSession | None = None

    @property
    def message(self) -> str | None:
        """Public message (identical for every failure)."""
        return None if self.refreshed else INVALID_TOKEN_MESSAGE
