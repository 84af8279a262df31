"""Database models for the durable tier.

These are infrastructure concerns and are not imported by the domain layer.
Domain entities live in src/domain/entities/ and are mapped by repositories.

Models:
    - session.py: SessionModel (user_sessions)
    - remember_me_token.py: RememberMeTokenModel (remember_me_tokens)
"""

from src.infrastructure.persistence.models.remember_me_token import (
    RememberMeTokenModel,
)
from src.infrastructure.persistence.models.session import SessionModel

__all__ = ["RememberMeTokenModel", "SessionModel"]
