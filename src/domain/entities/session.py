"""Session domain entity.

Pure business logic, no framework dependencies.

A Session represents one authenticated browser or device instance. Its
identifier is a 256-bit random value that doubles as the bearer credential.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from src.domain.enums import LoginType


@dataclass(slots=True, kw_only=True)
class Session:
    """Authenticated session record.

    Business Rules:
        - A session is active while ``expires_at`` is in the future
        - "Not found" and "found but expired" are treated identically
        - ``expires_at == last_activity + max_age_ms`` after create/refresh

    Attributes:
        session_id: 64 lowercase hex characters (256 bits).
        user_id: Owning principal.
        created_at: When the session was created (UTC).
        last_activity: Last create/refresh time (UTC).
        expires_at: When the session stops validating (UTC).
        max_age_ms: Lifetime granted at the last create/refresh.
        ip_address: Client IP captured at creation.
        user_agent: Client user agent captured at creation.
        device_fingerprint: Digest of stable request headers.
        login_type: How the session was obtained.
        persistent: True when created under "remember me".
    """

    session_id: str
    user_id: str
    created_at: datetime
    last_activity: datetime
    expires_at: datetime
    max_age_ms: int
    ip_address: str
    user_agent: str
    device_fingerprint: str
    login_type: LoginType = LoginType.PASSWORD
    persistent: bool = False

    def is_expired(self, now: datetime) -> bool:
        """Check if the session has expired at ``now``."""
        return self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        """Check if the session is still usable at ``now``."""
        return not self.is_expired(now)

    def remaining_ms(self, now: datetime) -> int:
        """Milliseconds left before expiry (never negative)."""
        remaining = (self.expires_at - now) // timedelta(milliseconds=1)
        return max(0, remaining)

    def with_expiry(
        self,
        *,
        last_activity: datetime,
        expires_at: datetime,
        max_age_ms: int,
    ) -> "Session":
        """Return a copy carrying a new activity/expiry window."""
        return replace(
            self,
            last_activity=last_activity,
            expires_at=expires_at,
            max_age_ms=max_age_ms,
        )
