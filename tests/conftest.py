"""Pytest configuration for the session core.

Fixtures:
1. A controllable clock and a mock logger for unit tests
2. fakeredis server/client for the cache tier (set ``connected = False``
   on the server to simulate an outage)
3. A file-backed SQLite database per test for the durable tier
4. Fully wired store, remember-me manager and session service
"""

from unittest.mock import Mock

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio

from src.application.services import RememberMeTokenManager, SessionService
from src.domain.enums import WriteConsistency
from src.domain.validators import SessionValidator
from src.domain.value_objects import SessionPolicy
from src.infrastructure.cache import CacheKeys, RedisAdapter, RedisSessionCache
from src.infrastructure.persistence import Database
from src.infrastructure.persistence.repositories import (
    RememberMeTokenRepository,
    SessionRepository,
)
from src.infrastructure.storage import TieredSessionStore
from tests.utils.utils import FixedClock


@pytest.fixture
def clock():
    """Clock frozen at a fixed UTC instant."""
    return FixedClock()


@pytest.fixture
def mock_logger():
    """Mock LoggerProtocol whose bind() returns the same mock."""
    logger = Mock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def policy():
    """Default session policy."""
    return SessionPolicy()


# ============================================================================
# Cache tier
# ============================================================================


@pytest.fixture
def redis_server():
    """In-memory Redis server shared by the clients of one test."""
    return fakeredis.FakeServer()


@pytest_asyncio.fixture
async def redis_client(redis_server):
    """fakeredis client bound to the test's server."""
    client = fakeredis.aioredis.FakeRedis(server=redis_server, decode_responses=False)
    yield client
    redis_server.connected = True
    await client.aclose()


@pytest.fixture
def cache_keys():
    return CacheKeys(prefix="test")


@pytest.fixture
def redis_adapter(redis_client):
    return RedisAdapter(redis_client, timeout_seconds=1.0)


@pytest.fixture
def session_cache(redis_adapter, cache_keys):
    return RedisSessionCache(redis_adapter, cache_keys)


# ============================================================================
# Durable tier
# ============================================================================


@pytest_asyncio.fixture
async def database(tmp_path):
    """Fresh SQLite database with the schema created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'sessions.db'}")
    await db.create_all()
    yield db
    await db.close()


@pytest.fixture
def session_repository(database):
    return SessionRepository(database)


@pytest.fixture
def token_repository(database):
    return RememberMeTokenRepository(database)


# ============================================================================
# Wired components
# ============================================================================


@pytest.fixture
def store(session_cache, session_repository, token_repository, clock, mock_logger):
    """Two-tier store with strict (synchronous) mirroring."""
    return TieredSessionStore(
        session_cache,
        session_repository,
        token_repository,
        clock=clock,
        logger=mock_logger,
    )


@pytest.fixture
def eventual_store(
    session_cache, session_repository, token_repository, clock, mock_logger
):
    """Two-tier store mirroring session writes in the background."""
    return TieredSessionStore(
        session_cache,
        session_repository,
        token_repository,
        clock=clock,
        logger=mock_logger,
        write_consistency=WriteConsistency.EVENTUAL,
    )


@pytest.fixture
def remember_me_manager(store, policy, clock, mock_logger):
    return RememberMeTokenManager(store, policy=policy, clock=clock, logger=mock_logger)


@pytest.fixture
def session_service(store, remember_me_manager, policy, clock, mock_logger):
    return SessionService(
        store,
        remember_me=remember_me_manager,
        validator=SessionValidator(policy),
        policy=policy,
        clock=clock,
        logger=mock_logger,
    )
