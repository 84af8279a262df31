"""Domain entities."""

from src.domain.entities.remember_me_token import RememberMeToken
from src.domain.entities.session import Session

__all__ = ["RememberMeToken", "Session"]
