"""Container module - Centralized dependency injection.

Composition root of the session core. Every factory is an lru_cache
singleton; nothing else in the codebase reads global state.

The container is organized into modules:
- infrastructure: settings, logging, Redis, database, clock
- sessions: store, remember-me manager, session service, cleanup scheduler

Usage:
    from src.core.container import get_session_service

    service = get_session_service()
"""

from src.core.config import get_settings
from src.core.container.infrastructure import (
    get_clock,
    get_database,
    get_logger,
    get_redis_client,
)
from src.core.container.sessions import (
    get_cleanup_scheduler,
    get_remember_me_manager,
    get_session_policy,
    get_session_service,
    get_session_store,
)

__all__ = [
    "get_cleanup_scheduler",
    "get_clock",
    "get_database",
    "get_logger",
    "get_redis_client",
    "get_remember_me_manager",
    "get_session_policy",
    "get_session_service",
    "get_session_store",
    "get_settings",
]
