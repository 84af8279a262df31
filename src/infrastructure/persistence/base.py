"""Base model for all database entities.

Following hexagonal architecture:
- This is an infrastructure concern (database implementation detail)
- Domain entities do NOT inherit from this
- Domain entities are mapped to/from database models by repositories

Primary keys are declared by each model: session ids and token hashes are
already 256-bit values produced by the application, so no surrogate key is
generated here.

Usage:
    class SessionModel(BaseModel):
        __tablename__ = "user_sessions"
        id: Mapped[str] = mapped_column(String(64), primary_key=True)
        # Has: created_at
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, func, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class BaseModel(DeclarativeBase):
    """Base class for all database models.

    Provides the creation timestamp every table carries. The application
    normally supplies it (from its injected clock); the server default only
    covers rows inserted by hand.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        """String representation for debugging.

        Returns:
            str: Class name and primary key.
        """
        identity = inspect(self).identity
        return f"<{self.__class__.__name__}(pk={identity})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary (for debugging/logging).

        Returns:
            dict: Column name to value, datetimes as ISO strings.
        """
        data: dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            data[column.key] = value.isoformat() if isinstance(value, datetime) else value
        return data


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from the database.

    SQLite stores timestamps without an offset; every timestamp written by
    the application is UTC, so a naive value read back is UTC as well.
    """
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value
