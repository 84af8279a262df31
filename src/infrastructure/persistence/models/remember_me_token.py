"""Remember-me token database model (durable tier).

One row per token, keyed by the SHA-256 of the plaintext token. The
plaintext is never persisted.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class RememberMeTokenModel(BaseModel):
    """Persisted remember-me token.

    Fields:
        token_hash: SHA-256 of the token, primary key
        user_id: Owning principal (indexed)
        device_fingerprint: Fingerprint of the issuing device
        created_at: Issue time (from BaseModel)
        expires_at: Expiry (indexed for sweeps)
    """

    __tablename__ = "remember_me_tokens"

    token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    device_fingerprint: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
