"""Domain enums for session lifecycle management.

Available Enums:
    - SessionVerdict: Outcome of validating a session
    - TokenVerdict: Outcome of validating a remember-me token
    - LoginType: Session provenance tag
    - IpMatchPolicy: Strict vs subnet-tolerant IP comparison
    - WriteConsistency: Synchronous vs background durable mirroring
"""

from src.domain.enums.ip_match_policy import IpMatchPolicy
from src.domain.enums.login_type import LoginType
from src.domain.enums.session_verdict import INVALID_SESSION_MESSAGE, SessionVerdict
from src.domain.enums.token_verdict import INVALID_TOKEN_MESSAGE, TokenVerdict
from src.domain.enums.write_consistency import WriteConsistency

__all__ = [
    "INVALID_SESSION_MESSAGE",
    "INVALID_TOKEN_MESSAGE",
    "IpMatchPolicy",
    "LoginType",
    "SessionVerdict",
    "TokenVerdict",
    "WriteConsistency",
]
