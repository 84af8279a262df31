"""Session validation verdicts.

A verdict is an expected outcome, not a fault: validation always produces
one of these values. Storage faults travel separately as Failure.

Every non-valid verdict renders to callers with the same public message so
that the specific failing check cannot be enumerated from outside.
"""

from enum import Enum

from src.core.enums import ErrorCode

INVALID_SESSION_MESSAGE = "Invalid or expired session"


class SessionVerdict(str, Enum):
    """Outcome of checking a session against the current request."""

    VALID = "valid"
    NOT_FOUND_OR_EXPIRED = "not_found_or_expired"
    IP_MISMATCH = "ip_mismatch"
    USER_AGENT_MISMATCH = "user_agent_mismatch"
    DEVICE_MISMATCH = "device_mismatch"

    @property
    def is_valid(self) -> bool:
        """True only for VALID."""
        return self is SessionVerdict.VALID

    @property
    def is_security_failure(self) -> bool:
        """True for verdicts raised by a consistency check (not expiry)."""
        return self in (
            SessionVerdict.IP_MISMATCH,
            SessionVerdict.USER_AGENT_MISMATCH,
            SessionVerdict.DEVICE_MISMATCH,
        )

    @property
    def error_code(self) -> ErrorCode | None:
        """Machine-readable code for logs and audit, None when valid."""
        return _SESSION_ERROR_CODES.get(self)

    @property
    def public_message(self) -> str | None:
        """Message safe to show an end user, None when valid."""
        return None if self.is_valid else INVALID_SESSION_MESSAGE


_SESSION_ERROR_CODES: dict[SessionVerdict, ErrorCode] = {
    SessionVerdict.NOT_FOUND_OR_EXPIRED: ErrorCode.SESSION_NOT_FOUND_OR_EXPIRED,
    SessionVerdict.IP_MISMATCH: ErrorCode.SESSION_IP_MISMATCH,
    SessionVerdict.USER_AGENT_MISMATCH: ErrorCode.SESSION_USER_AGENT_MISMATCH,
    SessionVerdict.DEVICE_MISMATCH: ErrorCode.SESSION_DEVICE_MISMATCH,
}
