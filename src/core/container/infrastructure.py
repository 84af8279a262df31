"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Settings (pydantic-settings)
- Logging (structlog console adapter)
- Redis client (fast tier)
- Database (durable tier)
- Clock
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from src.domain.protocols.clock_protocol import ClockProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    LOG_JSON overrides the environment default.

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(use_json=settings.use_json_logs, level=settings.log_level)


@lru_cache()
def get_clock() -> "ClockProtocol":
    """Get the system clock singleton (UTC)."""
    from src.core.clock import SystemClock

    return SystemClock()


@lru_cache()
def get_redis_client() -> "Redis":
    """Get Redis client singleton (app-scoped).

    Connection pool is shared across the entire application. Socket
    timeouts stay above the per-operation cache timeout so that the
    adapter's own bound is what callers observe.

    Returns:
        Async Redis client.
    """
    from redis.asyncio import ConnectionPool, Redis

    settings = get_settings()
    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        socket_keepalive=True,
    )
    return Redis(connection_pool=pool)


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Returns:
        Database manager instance with its connection pool.
    """
    settings = get_settings()
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )
