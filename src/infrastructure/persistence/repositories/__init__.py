"""Repository implementations for the durable tier.

Usage:
    from src.infrastructure.persistence.repositories import SessionRepository
"""

from src.infrastructure.persistence.repositories.remember_me_token_repository import (
    RememberMeTokenRepository,
)
from src.infrastructure.persistence.repositories.session_repository import (
    SessionRepository,
)

__all__ = ["RememberMeTokenRepository", "SessionRepository"]
