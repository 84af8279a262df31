"""Application services for the session lifecycle.

Usage:
    from src.core.container import get_session_service

    service = get_session_service()
    result = await service.create_session(user_id, context)
"""

from src.application.services.remember_me_service import (
    RememberMeTokenManager,
    SessionCreator,
    hash_token,
)
from src.application.services.session_service import (
    SessionService,
    is_well_formed_session_id,
)

__all__ = [
    "RememberMeTokenManager",
    "SessionCreator",
    "SessionService",
    "hash_token",
    "is_well_formed_session_id",
]
