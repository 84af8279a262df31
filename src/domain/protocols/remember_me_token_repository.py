"""Durable-tier remember-me token repository protocol."""

from datetime import datetime
from typing import Protocol

from src.domain.entities import RememberMeToken


class RememberMeTokenRepository(Protocol):
    """Remember-me token repository port (durable tier)."""

    async def save(self, token: RememberMeToken) -> None:
        """Insert or update a token."""
        ...

    async def find_by_hash(self, token_hash: str) -> RememberMeToken | None:
        """Find a token by its hash."""
        ...

    async def find_hashes_by_user_id(self, user_id: str) -> list[str]:
        """Find the hashes of all tokens of a user."""
        ...

    async def delete_many(self, token_hashes: list[str]) -> list[str]:
        """Delete tokens by hash.

        Returns:
            Hashes that existed and were deleted.
        """
        ...

    async def delete_expired(self, *, before: datetime) -> list[tuple[str, str]]:
        """Delete tokens with ``expires_at <= before``.

        Returns:
            (token_hash, user_id) pairs that were deleted.
        """
        ...
