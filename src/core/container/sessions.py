"""Session core factories.

Wires the two-tier store, the remember-me token manager, the session
service and the cleanup scheduler from settings. Adapters are imported
inside the factories so the container stays import-cycle free.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings
from src.core.container.infrastructure import (
    get_clock,
    get_database,
    get_logger,
    get_redis_client,
)

if TYPE_CHECKING:
    from src.application.services import RememberMeTokenManager, SessionService
    from src.domain.protocols.session_store_protocol import SessionStoreProtocol
    from src.domain.value_objects import SessionPolicy
    from src.infrastructure.jobs import SessionCleanupScheduler


@lru_cache()
def get_session_policy() -> "SessionPolicy":
    """Get the immutable session policy built from settings."""
    from src.domain.value_objects import SessionPolicy

    return SessionPolicy.from_settings(get_settings())


@lru_cache()
def get_session_store() -> "SessionStoreProtocol":
    """Get the two-tier session store singleton.

    Returns:
        TieredSessionStore over Redis and the configured database.
    """
    from src.domain.enums import WriteConsistency
    from src.infrastructure.cache import CacheKeys, RedisAdapter, RedisSessionCache
    from src.infrastructure.persistence.repositories import (
        RememberMeTokenRepository,
        SessionRepository,
    )
    from src.infrastructure.storage import TieredSessionStore

    settings = get_settings()
    database = get_database()
    cache = RedisSessionCache(
        RedisAdapter(get_redis_client(), timeout_seconds=settings.cache_timeout_seconds),
        CacheKeys(prefix=settings.cache_key_prefix),
    )
    return TieredSessionStore(
        cache,
        SessionRepository(database),
        RememberMeTokenRepository(database),
        clock=get_clock(),
        logger=get_logger(),
        durable_timeout_seconds=settings.durable_timeout_seconds,
        write_consistency=WriteConsistency(settings.write_consistency),
    )


@lru_cache()
def get_remember_me_manager() -> "RememberMeTokenManager":
    """Get the remember-me token manager singleton."""
    from src.application.services import RememberMeTokenManager

    return RememberMeTokenManager(
        get_session_store(),
        policy=get_session_policy(),
        clock=get_clock(),
        logger=get_logger(),
    )


@lru_cache()
def get_session_service() -> "SessionService":
    """Get the session service singleton.

    Usage:
        # Presentation Layer (FastAPI Depends)
        from fastapi import Depends
        service: SessionService = Depends(get_session_service)
    """
    from src.application.services import SessionService
    from src.domain.validators import SessionValidator

    policy = get_session_policy()
    return SessionService(
        get_session_store(),
        remember_me=get_remember_me_manager(),
        validator=SessionValidator(policy),
        policy=policy,
        clock=get_clock(),
        logger=get_logger(),
    )


@lru_cache()
def get_cleanup_scheduler() -> "SessionCleanupScheduler":
    """Get the expired-session cleanup scheduler singleton.

    Usage:
        scheduler = get_cleanup_scheduler()
        scheduler.start()
        ...
        await scheduler.stop()
    """
    from src.infrastructure.jobs import SessionCleanupScheduler

    return SessionCleanupScheduler(
        get_session_store(),
        interval_seconds=get_settings().cleanup_interval_seconds,
        logger=get_logger(),
    )
