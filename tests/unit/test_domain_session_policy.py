"""Unit tests for session entities, policy and storage reports."""

from datetime import timedelta

import pytest

from src.domain.enums import IpMatchPolicy
from src.domain.value_objects import CleanupReport, SessionCounts, SessionPolicy
from tests.utils.utils import DAY_MS, START, make_session, make_token


@pytest.mark.unit
class TestSessionEntity:
    """Test Session expiry helpers."""

    def test_remaining_ms(self):
        session = make_session(max_age_ms=60_000)

        assert session.remaining_ms(START) == 60_000
        assert session.remaining_ms(START + timedelta(seconds=59)) == 1000
        assert session.remaining_ms(START + timedelta(minutes=5)) == 0

    def test_is_active_until_expiry(self):
        session = make_session(max_age_ms=1000)

        assert session.is_active(START)
        assert session.is_expired(START + timedelta(milliseconds=1000))

    def test_with_expiry_returns_copy(self):
        session = make_session()
        later = START + timedelta(hours=1)

        updated = session.with_expiry(
            last_activity=later,
            expires_at=later + timedelta(days=1),
            max_age_ms=DAY_MS,
        )

        assert updated is not session
        assert updated.session_id == session.session_id
        assert updated.last_activity == later
        assert session.last_activity == START

    def test_token_expiry(self):
        token = make_token(ttl_ms=1000)

        assert not token.is_expired(START)
        assert token.is_expired(START + timedelta(seconds=1))
        assert token.remaining_ms(START) == 1000


@pytest.mark.unit
class TestSessionPolicy:
    """Test policy defaults and validation."""

    def test_defaults(self):
        policy = SessionPolicy()

        assert policy.default_max_age_ms == DAY_MS
        assert policy.remember_me_max_age_ms == 7 * DAY_MS
        assert policy.remember_me_token_ttl_ms == 30 * DAY_MS
        assert policy.ip_match_policy is IpMatchPolicy.SUBNET
        assert policy.ipv4_subnet_prefix == 24
        assert policy.ipv6_subnet_prefix == 64
        assert policy.check_device_fingerprint is False
        assert policy.bind_remember_me_to_device is True
        assert policy.destroy_on_security_failure is True

    def test_max_age_for(self):
        policy = SessionPolicy()

        assert policy.max_age_for(remember_me=False) == DAY_MS
        assert policy.max_age_for(remember_me=True) == 7 * DAY_MS

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"default_max_age_ms": 0},
            {"remember_me_max_age_ms": -1},
            {"remember_me_token_ttl_ms": 0},
            {"ipv4_subnet_prefix": 33},
            {"ipv6_subnet_prefix": 129},
            {"ipv4_subnet_prefix": -1},
        ],
    )
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ValueError):
            SessionPolicy(**kwargs)


@pytest.mark.unit
class TestStorageReports:
    """Test derived counts."""

    def test_session_counts_expired(self):
        counts = SessionCounts(total=10, active=7)

        assert counts.expired == 3

    def test_cleanup_report_cleaned_count(self):
        report = CleanupReport(sessions_removed=4, tokens_removed=2, index_entries_pruned=9)

        assert report.cleaned_count == 6

    def test_cleanup_report_defaults_to_zero(self):
        assert CleanupReport().cleaned_count == 0
