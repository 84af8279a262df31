"""Logical session store protocol.

The single storage interface the service layer sees. Implementations decide
which tier serves a request; callers never learn the difference except
through ``cache_available`` (reported in stats).

All operations return ``Result[..., StorageUnavailableError]``. Not-found
is a Success carrying None, never a Failure.
"""

from datetime import datetime
from typing import Protocol

from src.core.result import Result
from src.domain.entities import RememberMeToken, Session
from src.domain.enums import WriteConsistency
from src.domain.errors import StorageUnavailableError
from src.domain.value_objects import CleanupReport, SessionCounts


class SessionStoreProtocol(Protocol):
    """Two-tier session and remember-me token store."""

    @property
    def cache_available(self) -> bool:
        """Whether the last cache interaction succeeded."""
        ...

    async def check_cache(self) -> bool:
        """Probe the cache tier and record the outcome."""
        ...

    async def put(
        self, session: Session, *, consistency: WriteConsistency | None = None
    ) -> Result[None, StorageUnavailableError]:
        """Store a session and index it under its owner."""
        ...

    async def get(self, session_id: str) -> Result[Session | None, StorageUnavailableError]:
        """Fetch a session (expired records are returned as-is)."""
        ...

    async def touch(
        self,
        session_id: str,
        *,
        last_activity: datetime,
        expires_at: datetime,
        max_age_ms: int,
    ) -> Result[Session | None, StorageUnavailableError]:
        """Move a session's expiry window. Success(None) if it is gone."""
        ...

    async def delete(self, session_id: str) -> Result[bool, StorageUnavailableError]:
        """Delete a session. Success(False) if it did not exist."""
        ...

    async def list_by_user(
        self, user_id: str
    ) -> Result[list[Session], StorageUnavailableError]:
        """All stored sessions of a user, newest first."""
        ...

    async def delete_all_by_user(
        self, user_id: str, *, except_session_id: str | None = None
    ) -> Result[int, StorageUnavailableError]:
        """Delete every session of a user except one. Returns the count."""
        ...

    async def count(self) -> Result[SessionCounts, StorageUnavailableError]:
        """Count stored sessions."""
        ...

    async def put_token(
        self, token: RememberMeToken
    ) -> Result[None, StorageUnavailableError]:
        """Store a remember-me token."""
        ...

    async def get_token(
        self, token_hash: str
    ) -> Result[RememberMeToken | None, StorageUnavailableError]:
        """Fetch a remember-me token by hash."""
        ...

    async def delete_token(self, token_hash: str) -> Result[bool, StorageUnavailableError]:
        """Delete a remember-me token."""
        ...

    async def delete_tokens_by_user(
        self, user_id: str
    ) -> Result[int, StorageUnavailableError]:
        """Delete every remember-me token of a user."""
        ...

    async def purge_expired(self) -> Result[CleanupReport, StorageUnavailableError]:
        """Delete expired sessions and tokens from both tiers."""
        ...
