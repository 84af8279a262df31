"""RememberMeTokenRepository - SQLAlchemy implementation.

Maps RememberMeToken entities to RememberMeTokenModel rows. One unit of
work per call; exceptions propagate to the tiered store.
"""

from datetime import datetime

from sqlalchemy import delete, select

from src.domain.entities import RememberMeToken
from src.infrastructure.persistence.base import ensure_utc
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import RememberMeTokenModel


class RememberMeTokenRepository:
    """SQLAlchemy implementation of RememberMeTokenRepository protocol.

    Attributes:
        _database: Database providing units of work.
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository.

        Args:
            database: Database providing async sessions.
        """
        self._database = database

    async def save(self, token: RememberMeToken) -> None:
        """Insert or update a token."""
        async with self._database.get_session() as db:
            existing = await db.get(RememberMeTokenModel, token.token_hash)
            if existing is None:
                db.add(self._to_model(token))
            else:
                existing.device_fingerprint = token.device_fingerprint
                existing.expires_at = token.expires_at

    async def find_by_hash(self, token_hash: str) -> RememberMeToken | None:
        """Find a token by its hash."""
        async with self._database.get_session() as db:
            model = await db.get(RememberMeTokenModel, token_hash)
            return None if model is None else self._to_entity(model)

    async def find_hashes_by_user_id(self, user_id: str) -> list[str]:
        """Find the hashes of all tokens of a user."""
        stmt = select(RememberMeTokenModel.token_hash).where(
            RememberMeTokenModel.user_id == user_id
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    async def delete_many(self, token_hashes: list[str]) -> list[str]:
        """Delete tokens by hash.

        Returns:
            Hashes that existed and were deleted.
        """
        if not token_hashes:
            return []

        async with self._database.get_session() as db:
            found = await db.execute(
                select(RememberMeTokenModel.token_hash).where(
                    RememberMeTokenModel.token_hash.in_(token_hashes)
                )
            )
            existing = list(found.scalars().all())
            if existing:
                await db.execute(
                    delete(RememberMeTokenModel).where(
                        RememberMeTokenModel.token_hash.in_(existing)
                    )
                )
            return existing

    async def delete_expired(self, *, before: datetime) -> list[tuple[str, str]]:
        """Delete tokens with ``expires_at <= before``.

        Returns:
            (token_hash, user_id) pairs that were deleted.
        """
        async with self._database.get_session() as db:
            found = await db.execute(
                select(RememberMeTokenModel.token_hash, RememberMeTokenModel.user_id)
                .where(RememberMeTokenModel.expires_at <= before)
            )
            expired = [(row.token_hash, row.user_id) for row in found.all()]
            if expired:
                await db.execute(
                    delete(RememberMeTokenModel).where(
                        RememberMeTokenModel.token_hash.in_([h for h, _ in expired])
                    )
                )
            return expired

    def _to_entity(self, model: RememberMeTokenModel) -> RememberMeToken:
        """Convert database model to domain entity."""
        return RememberMeToken(
            token_hash=model.token_hash,
            user_id=model.user_id,
            device_fingerprint=model.device_fingerprint,
            created_at=ensure_utc(model.created_at),
            expires_at=ensure_utc(model.expires_at),
        )

    def _to_model(self, token: RememberMeToken) -> RememberMeTokenModel:
        """Convert domain entity to database model."""
        return RememberMeTokenModel(
            token_hash=token.token_hash,
            user_id=token.user_id,
            device_fingerprint=token.device_fingerprint,
            created_at=token.created_at,
            expires_at=token.expires_at,
        )
