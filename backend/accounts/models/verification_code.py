"""Pending email verification codes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from accounts.core.extensions import db

from .base import PKMixin, ReprMixin, UTCDateTime


class VerificationCode(PKMixin, ReprMixin, db.Model):
    """
    One live verification code per user.

    A new issuance replaces the previous row for the same ``user_id``; a
    successful verification deletes it. Rows whose ``expires_at`` has passed
    are inert even before they are purged.
    """

    __tablename__ = "verification_codes"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    code: Mapped[str] = mapped_column(String(16), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_verification_codes_user_id"),
        Index("ix_verification_codes_code", "code"),
    )
