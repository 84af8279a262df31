"""Remember-me token domain entity.

Only the SHA-256 hash of a token is ever stored; the plaintext is handed to
the client once at issue time.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(slots=True, kw_only=True)
class RememberMeToken:
    """Long-lived, device-bound credential that can mint new sessions.

    Attributes:
        token_hash: SHA-256 hex digest of the plaintext token.
        user_id: Owning principal.
        device_fingerprint: Fingerprint of the device the token was issued to.
        created_at: Issue time (UTC).
        expires_at: Expiry (UTC).
    """

    token_hash: str
    user_id: str
    device_fingerprint: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Check if the token has expired at ``now``."""
        return self.expires_at <= now

    def remaining_ms(self, now: datetime) -> int:
        """Milliseconds left before expiry (never negative)."""
        return max(0, (self.expires_at - now) // timedelta(milliseconds=1))
