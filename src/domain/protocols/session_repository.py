"""Durable-tier session repository protocol.

The relational store is the fallback tier and the source of truth for
counts and expiry sweeps. Implementations raise on I/O failure; the tiered
store maps those exceptions to StorageUnavailableError.
"""

from datetime import datetime
from typing import Protocol

from src.domain.entities import Session


class SessionRepository(Protocol):
    """Session repository port (durable tier)."""

    async def save(self, session: Session) -> None:
        """Insert or update a session."""
        ...

    async def find_by_id(self, session_id: str) -> Session | None:
        """Find a session by id."""
        ...

    async def find_by_user_id(self, user_id: str) -> list[Session]:
        """Find all sessions of a user, newest first."""
        ...

    async def find_ids_by_user_id(self, user_id: str) -> list[str]:
        """Find the ids of all sessions of a user."""
        ...

    async def update_expiry(
        self,
        session_id: str,
        *,
        last_activity: datetime,
        expires_at: datetime,
        max_age_ms: int,
    ) -> bool:
        """Move the expiry window of an existing session.

        Returns:
            True if the session existed and was updated.
        """
        ...

    async def delete_many(self, session_ids: list[str]) -> list[str]:
        """Delete sessions by id.

        Returns:
            Ids that existed and were deleted.
        """
        ...

    async def count(self, *, now: datetime) -> tuple[int, int]:
        """Count sessions.

        Returns:
            Tuple of (total, active at ``now``).
        """
        ...

    async def delete_expired(self, *, before: datetime) -> list[tuple[str, str]]:
        """Delete sessions with ``expires_at <= before``.

        Returns:
            (session_id, user_id) pairs that were deleted.
        """
        ...
