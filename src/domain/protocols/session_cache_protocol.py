"""Fast-tier (cache) protocol for sessions and remember-me tokens.

Defines what the tiered store needs from a TTL-capable key-value cache.
Infrastructure implements it with Redis.

Every operation returns a Result so the store can tell a clean miss
(``Success(value=None)``) from an outage (``Failure``). Outages are absorbed
by the store and never reach callers.

Index invariants:
    - Writing a record adds its id to the owner's index in the same atomic
      operation.
    - Deleting a record removes its id from the owner's index in the same
      atomic operation.
"""

from datetime import datetime
from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result
from src.domain.entities import RememberMeToken, Session


class SessionCacheProtocol(Protocol):
    """Session cache port (fast tier)."""

    async def ping(self) -> Result[bool, DomainError]:
        """Check the cache is reachable."""
        ...

    async def get_session(self, session_id: str) -> Result[Session | None, DomainError]:
        """Get a cached session.

        Returns:
            Success(Session), Success(None) on miss, or Failure on outage.
        """
        ...

    async def put_session(
        self, session: Session, *, now: datetime
    ) -> Result[None, DomainError]:
        """Cache a session with TTL equal to its remaining lifetime.

        Also adds the session id to the owner's index atomically.
        """
        ...

    async def replace_session(
        self, session: Session, *, now: datetime
    ) -> Result[bool, DomainError]:
        """Overwrite a cached session only if it is still cached.

        Returns:
            Success(True) if replaced, Success(False) if absent.
        """
        ...

    async def delete_sessions(
        self, user_id: str | None, session_ids: list[str]
    ) -> Result[list[str], DomainError]:
        """Delete sessions and their index entries atomically.

        Args:
            user_id: Owner whose index to update (None when unknown).
            session_ids: Sessions to delete.

        Returns:
            Ids whose cache record actually existed.
        """
        ...

    async def user_session_ids(self, user_id: str) -> Result[set[str], DomainError]:
        """Get the ids in a user's session index."""
        ...

    async def get_token(
        self, token_hash: str
    ) -> Result[RememberMeToken | None, DomainError]:
        """Get a cached remember-me token."""
        ...

    async def put_token(
        self, token: RememberMeToken, *, now: datetime
    ) -> Result[None, DomainError]:
        """Cache a remember-me token and index it under its owner."""
        ...

    async def delete_tokens(
        self, user_id: str | None, token_hashes: list[str]
    ) -> Result[list[str], DomainError]:
        """Delete tokens and their index entries atomically."""
        ...

    async def user_token_hashes(self, user_id: str) -> Result[set[str], DomainError]:
        """Get the hashes in a user's token index."""
        ...

    async def prune_indexes(self) -> Result[int, DomainError]:
        """Remove index members whose record no longer exists.

        Returns:
            Number of members removed.
        """
        ...
