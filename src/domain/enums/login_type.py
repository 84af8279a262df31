"""How a session was obtained (informational only)."""

from enum import Enum


class LoginType(str, Enum):
    """Provenance tag recorded on every session."""

    PASSWORD = "password"
    SOCIAL = "social"
    OTP = "otp"
    REMEMBER_ME = "remember_me"
