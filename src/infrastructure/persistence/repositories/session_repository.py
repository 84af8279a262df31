"""SessionRepository - SQLAlchemy implementation of SessionRepository protocol.

Adapter for hexagonal architecture. Maps between domain Session entities
and SessionModel rows. Each method runs in its own unit of work obtained
from Database.get_session(), so one repository instance is safe to share
between concurrent requests.

Exceptions (SQLAlchemyError, driver errors) propagate; the tiered store
maps them to StorageUnavailableError.
"""

from datetime import datetime
from typing import Any, cast

from sqlalchemy import case, delete, func, select, update

from src.domain.entities import Session
from src.domain.enums import LoginType
from src.infrastructure.persistence.base import ensure_utc
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import SessionModel


class SessionRepository:
    """SQLAlchemy implementation of SessionRepository protocol.

    This class does NOT inherit from SessionRepository protocol
    (Protocol uses structural typing).

    Attributes:
        _database: Database providing units of work.

    Example:
        >>> repo = SessionRepository(database)
        >>> session = await repo.find_by_id(session_id)
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository.

        Args:
            database: Database providing async sessions.
        """
        self._database = database

    async def save(self, session: Session) -> None:
        """Insert or update a session.

        Args:
            session: Session entity to persist.
        """
        async with self._database.get_session() as db:
            existing = await db.get(SessionModel, session.session_id)
            if existing is None:
                db.add(self._to_model(session))
            else:
                self._update_model(existing, session)

    async def find_by_id(self, session_id: str) -> Session | None:
        """Find session by id.

        Returns:
            Session if found, None otherwise.
        """
        async with self._database.get_session() as db:
            model = await db.get(SessionModel, session_id)
            return None if model is None else self._to_entity(model)

    async def find_by_user_id(self, user_id: str) -> list[Session]:
        """Find all sessions of a user.

        Returns:
            Sessions ordered by created_at descending (newest first).
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.user_id == user_id)
            .order_by(SessionModel.created_at.desc())
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return [self._to_entity(model) for model in result.scalars().all()]

    async def find_ids_by_user_id(self, user_id: str) -> list[str]:
        """Find the ids of all sessions of a user."""
        stmt = select(SessionModel.id).where(SessionModel.user_id == user_id)
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    async def update_expiry(
        self,
        session_id: str,
        *,
        last_activity: datetime,
        expires_at: datetime,
        max_age_ms: int,
    ) -> bool:
        """Move the expiry window of an existing session.

        Never inserts: a session deleted concurrently stays deleted.

        Returns:
            True if the session existed and was updated.
        """
        stmt = (
            update(SessionModel)
            .where(SessionModel.id == session_id)
            .values(
                last_activity=last_activity,
                expires_at=expires_at,
                max_age_ms=max_age_ms,
            )
        )
        async with self._database.get_session() as db:
            result = await db.execute(stmt)
            return (cast(Any, result).rowcount or 0) > 0

    async def delete_many(self, session_ids: list[str]) -> list[str]:
        """Delete sessions by id (hard delete).

        Returns:
            Ids that existed and were deleted.
        """
        if not session_ids:
            return []

        async with self._database.get_session() as db:
            found = await db.execute(
                select(SessionModel.id).where(SessionModel.id.in_(session_ids))
            )
            existing = list(found.scalars().all())
            if existing:
                await db.execute(delete(SessionModel).where(SessionModel.id.in_(existing)))
            return existing

    async def count(self, *, now: datetime) -> tuple[int, int]:
        """Count stored sessions.

        Returns:
            Tuple of (total, active at ``now``).
        """
        stmt = select(
            func.count(),
            func.coalesce(
                func.sum(case((SessionModel.expires_at > now, 1), else_=0)), 0
            ),
        ).select_from(SessionModel)
        async with self._database.get_session() as db:
            total, active = (await db.execute(stmt)).one()
            return int(total), int(active)

    async def delete_expired(self, *, before: datetime) -> list[tuple[str, str]]:
        """Delete sessions with ``expires_at <= before`` (batch operation).

        Called by the cleanup scheduler.

        Returns:
            (session_id, user_id) pairs that were deleted.
        """
        async with self._database.get_session() as db:
            found = await db.execute(
                select(SessionModel.id, SessionModel.user_id).where(
                    SessionModel.expires_at <= before
                )
            )
            expired = [(row.id, row.user_id) for row in found.all()]
            if not expired:
                return []

            result = await db.execute(
                delete(SessionModel).where(
                    SessionModel.id.in_([session_id for session_id, _ in expired]),
                    SessionModel.expires_at <= before,
                )
            )
            if (cast(Any, result).rowcount or 0) != len(expired):
                # A concurrent refresh moved some rows out of the window
                survivors = await db.execute(
                    select(SessionModel.id).where(
                        SessionModel.id.in_([sid for sid, _ in expired])
                    )
                )
                kept = set(survivors.scalars().all())
                expired = [pair for pair in expired if pair[0] not in kept]
            return expired

    # =========================================================================
    # Mapping methods
    # =========================================================================

    def _to_entity(self, model: SessionModel) -> Session:
        """Convert database model to domain entity."""
        return Session(
            session_id=model.id,
            user_id=model.user_id,
            created_at=ensure_utc(model.created_at),
            last_activity=ensure_utc(model.last_activity),
            expires_at=ensure_utc(model.expires_at),
            max_age_ms=model.max_age_ms,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            device_fingerprint=model.device_fingerprint,
            login_type=LoginType(model.login_type),
            persistent=model.persistent,
        )

    def _to_model(self, session: Session) -> SessionModel:
        """Convert domain entity to database model."""
        return SessionModel(
            id=session.session_id,
            user_id=session.user_id,
            created_at=session.created_at,  # Explicit: override DB default
            last_activity=session.last_activity,
            expires_at=session.expires_at,
            max_age_ms=session.max_age_ms,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            device_fingerprint=session.device_fingerprint,
            login_type=session.login_type.value,
            persistent=session.persistent,
        )

    def _update_model(self, model: SessionModel, session: Session) -> None:
        """Update mutable fields of an existing row (not id, user_id, created_at)."""
        model.last_activity = session.last_activity
        model.expires_at = session.expires_at
        model.max_age_ms = session.max_age_ms
        model.ip_address = session.ip_address
        model.user_agent = session.user_agent
        model.device_fingerprint = session.device_fingerprint
        model.login_type = session.login_type.value
        model.persistent = session.persistent
