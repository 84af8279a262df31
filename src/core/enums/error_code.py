"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Session verdicts (SESSION_*)
- Remember-me verdicts (REMEMBER_ME_*)
- Storage faults (STORAGE_*)
- Validation errors (VALIDATION_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Session verdicts
    SESSION_NOT_FOUND_OR_EXPIRED = "session_not_found_or_expired"
    SESSION_IP_MISMATCH = "session_ip_mismatch"
    SESSION_USER_AGENT_MISMATCH = "session_user_agent_mismatch"
    SESSION_DEVICE_MISMATCH = "session_device_mismatch"

    # Remember-me verdicts
    REMEMBER_ME_TOKEN_EXPIRED = "remember_me_token_expired"
    REMEMBER_ME_TOKEN_INVALID = "remember_me_token_invalid"
    REMEMBER_ME_DEVICE_MISMATCH = "remember_me_device_mismatch"

    # Storage faults
    STORAGE_UNAVAILABLE = "storage_unavailable"

    # Validation errors
    VALIDATION_FAILED = "validation_failed"
