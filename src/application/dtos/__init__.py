"""Data Transfer Objects (DTOs) for application layer.

DTOs are result dataclasses returned by the application services. They
transfer data from the application layer to the presentation layer.

Usage:
    from src.application.dtos import CreatedSession, SessionOptions

Note:
    DTOs are NOT the same as domain entities (Session, RememberMeToken),
    which never leave the application layer except inside SessionValidation.
"""

from src.application.dtos.session_dtos import (
    CreatedSession,
    IssuedRememberMeToken,
    SessionOptions,
    SessionRefresh,
    SessionStats,
    SessionValidation,
    SessionView,
    TokenRefresh,
    TokenValidation,
)

__all__ = [
    "CreatedSession",
    "IssuedRememberMeToken",
    "SessionOptions",
    "SessionRefresh",
    "SessionStats",
    "SessionValidation",
    "SessionView",
    "TokenRefresh",
    "TokenValidation",
]
