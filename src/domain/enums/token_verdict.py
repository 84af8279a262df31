"""Remember-me token verdicts."""

from enum import Enum

from src.core.enums import ErrorCode

INVALID_TOKEN_MESSAGE = "Invalid or expired remember-me token"


class TokenVerdict(str, Enum):
    """Outcome of checking a remember-me token.

    INVALID_TOKEN and TOKEN_EXPIRED are kept apart for logs only; both
    render with INVALID_TOKEN_MESSAGE.
    """

    VALID = "valid"
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    DEVICE_MISMATCH = "device_mismatch"

    @property
    def is_valid(self) -> bool:
        """True only for VALID."""
        return self is TokenVerdict.VALID

    @property
    def error_code(self) -> ErrorCode | None:
        """Machine-readable code for logs and audit, None when valid."""
        return _TOKEN_ERROR_CODES.get(self)


_TOKEN_ERROR_CODES: dict[TokenVerdict, ErrorCode] = {
    TokenVerdict.INVALID_TOKEN: ErrorCode.REMEMBER_ME_TOKEN_INVALID,
    TokenVerdict.TOKEN_EXPIRED: ErrorCode.REMEMBER_ME_TOKEN_EXPIRED,
    TokenVerdict.DEVICE_MISMATCH: ErrorCode.REMEMBER_ME_DEVICE_MISMATCH,
}
