"""Session database model (durable tier).

One row per session. Queryable by primary key (the session id) and by
``user_id``; ``expires_at`` is indexed for the cleanup sweep.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class SessionModel(BaseModel):
    """Persisted session record.

    Fields:
        id: Session id (64 hex chars), primary key
        user_id: Owning principal (indexed)
        created_at: Creation timestamp (from BaseModel)
        last_activity: Last create/refresh time
        expires_at: Expiry (indexed for sweeps)
        max_age_ms: Lifetime granted at last create/refresh
        ip_address: Client IP at creation (IPv4 or IPv6 text)
        user_agent: Client user agent at creation
        device_fingerprint: SHA256 device fingerprint
        login_type: password, social, otp, remember_me
        persistent: Created under "remember me"
    """

    __tablename__ = "user_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_activity: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    max_age_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)
    ip_address: Mapped[str] = mapped_column(String(45), nullable=False, default="")
    user_agent: Mapped[str] = mapped_column(Text, nullable=False, default="")
    device_fingerprint: Mapped[str] = mapped_column(String(64), nullable=False)
    login_type: Mapped[str] = mapped_column(String(32), nullable=False)
    persistent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
