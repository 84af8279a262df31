"""Domain validators.

Exports:
    - SessionValidator: ordered security checks producing a SessionVerdict
    - ip_addresses_match: strict / subnet-tolerant IP comparison
"""

from src.domain.validators.session_validator import (
    SessionValidator,
    ip_addresses_match,
)

__all__ = ["SessionValidator", "ip_addresses_match"]
