"""Aggregate results reported by the session store."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionCounts:
    """Session totals at the moment of counting.

    Attributes:
        total: All stored sessions, including expired-but-not-reaped.
        active: Sessions whose expiry is in the future.
    """

    total: int
    active: int

    @property
    def expired(self) -> int:
        """Stored sessions already past their expiry."""
        return self.total - self.active


@dataclass(frozen=True, slots=True, kw_only=True)
class CleanupReport:
    """Outcome of one expired-record sweep.

    Attributes:
        sessions_removed: Expired sessions deleted.
        tokens_removed: Expired remember-me tokens deleted.
        index_entries_pruned: Dangling per-user index members removed.
    """

    sessions_removed: int = 0
    tokens_removed: int = 0
    index_entries_pruned: int = 0

    @property
    def cleaned_count(self) -> int:
        """Sessions plus tokens removed."""
        return self.sessions_removed + self.tokens_removed
