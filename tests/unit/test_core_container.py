"""Unit tests for the dependency container wiring."""

import pytest

from src.application.services import RememberMeTokenManager, SessionService
from src.core import container
from src.core.config import get_settings
from src.domain.enums import IpMatchPolicy
from src.infrastructure.jobs import SessionCleanupScheduler
from src.infrastructure.storage import TieredSessionStore

FACTORIES = (
    get_settings,
    container.get_logger,
    container.get_clock,
    container.get_redis_client,
    container.get_database,
    container.get_session_policy,
    container.get_session_store,
    container.get_remember_me_manager,
    container.get_session_service,
    container.get_cleanup_scheduler,
)


@pytest.fixture
def configured_env(monkeypatch, tmp_path):
    """Point settings at local backends and reset every cached factory."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'c.db'}")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/15")
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("IP_MATCH_POLICY", "strict")
    monkeypatch.setenv("CLEANUP_INTERVAL_SECONDS", "30")
    for factory in FACTORIES:
        factory.cache_clear()
    yield
    for factory in FACTORIES:
        factory.cache_clear()


@pytest.mark.unit
class TestContainer:
    """Test factory wiring (no connections are opened)."""

    def test_builds_session_service(self, configured_env):
        service = container.get_session_service()

        assert isinstance(service, SessionService)
        assert isinstance(container.get_session_store(), TieredSessionStore)
        assert isinstance(container.get_remember_me_manager(), RememberMeTokenManager)

    def test_factories_are_singletons(self, configured_env):
        assert container.get_session_service() is container.get_session_service()
        assert container.get_session_store() is container.get_session_store()

    def test_policy_follows_settings(self, configured_env):
        policy = container.get_session_policy()

        assert policy.ip_match_policy is IpMatchPolicy.STRICT

    def test_cleanup_scheduler(self, configured_env):
        scheduler = container.get_cleanup_scheduler()

        assert isinstance(scheduler, SessionCleanupScheduler)
        assert scheduler.running is False
