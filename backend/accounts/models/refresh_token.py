"""Per-device refresh token records."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from accounts.core.extensions import db

from .base import PKMixin, ReprMixin, UTCDateTime


class RefreshToken(PKMixin, ReprMixin, db.Model):
    """
    Current refresh token of one ``(user, device)`` pair.

    Fields
    ------
    user_id : int
        Owner of the session.
    device_id : str
        Caller-supplied identifier of the app instance.
    token_hash : str
        Keyed hash of the refresh token; the plaintext is never stored.
    expires_at : datetime
        Absolute expiry of the refresh token.
    created_at : datetime
        Issuance time of the current token (reset on every rotation).
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    device_id: Mapped[str] = mapped_column(String(255), nullable=False)
    token_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "device_id", name="uq_refresh_tokens_user_id_device_id"),
        UniqueConstraint("token_hash", name="uq_refresh_tokens_token_hash"),
    )
