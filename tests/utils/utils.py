"""Helpers shared by the test suite.

Provides a controllable clock and builders for sessions, tokens and
request contexts with sensible defaults.
"""

import secrets
from datetime import UTC, datetime, timedelta

from src.domain.entities import RememberMeToken, Session
from src.domain.enums import LoginType
from src.domain.value_objects import RequestContext

DAY_MS = 24 * 60 * 60 * 1000

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FIREFOX_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14.2; rv:121.0) "
    "Gecko/20100101 Firefox/121.0"
)

START = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **delta: float) -> datetime:
        """Move forward by the given timedelta keywords (milliseconds=, hours=, days=)."""
        self._now += timedelta(**delta)
        return self._now


def make_context(
    ip_address: str = "192.168.1.100",
    user_agent: str = CHROME_UA,
    accept_language: str = "en-US,en;q=0.9",
    accept_encoding: str = "gzip, deflate, br",
) -> RequestContext:
    """Create a RequestContext for testing."""
    return RequestContext(
        ip_address=ip_address,
        user_agent=user_agent,
        accept_language=accept_language,
        accept_encoding=accept_encoding,
    )


def make_session(
    *,
    now: datetime = START,
    session_id: str | None = None,
    user_id: str = "user-1",
    max_age_ms: int = DAY_MS,
    ip_address: str = "192.168.1.100",
    user_agent: str = CHROME_UA,
    device_fingerprint: str = "f" * 64,
    login_type: LoginType = LoginType.PASSWORD,
    persistent: bool = False,
    created_at: datetime | None = None,
) -> Session:
    """Create a Session whose window starts at ``now``."""
    return Session(
        session_id=session_id or secrets.token_hex(32),
        user_id=user_id,
        created_at=created_at or now,
        last_activity=now,
        expires_at=now + timedelta(milliseconds=max_age_ms),
        max_age_ms=max_age_ms,
        ip_address=ip_address,
        user_agent=user_agent,
        device_fingerprint=device_fingerprint,
        login_type=login_type,
        persistent=persistent,
    )


def make_token(
    *,
    now: datetime = START,
    token_hash: str | None = None,
    user_id: str = "user-1",
    ttl_ms: int = 30 * DAY_MS,
    device_fingerprint: str = "f" * 64,
) -> RememberMeToken:
    """Create a RememberMeToken record issued at ``now``."""
    return RememberMeToken(
        token_hash=token_hash or secrets.token_hex(32),
        user_id=user_id,
        device_fingerprint=device_fingerprint,
        created_at=now,
        expires_at=now + timedelta(milliseconds=ttl_ms),
    )
