"""API module - HTTP adapters for the session core."""

from src.presentation.api.session_context import (
    build_request_context,
    extract_remember_me_token,
    extract_session_id,
    get_client_ip,
)

__all__ = [
    "build_request_context",
    "extract_remember_me_token",
    "extract_session_id",
    "get_client_ip",
]
