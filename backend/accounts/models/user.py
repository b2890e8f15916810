"""User model definition for the accounts core."""

from __future__ import annotations

from sqlalchemy import Boolean, String, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column, validates

from accounts.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    login : str
        Unique sign-in handle (trimmed).
    email : str
        Unique contact email. Stored normalized (lowercase, trimmed).
    password_hash : str
        Output of the configured password hasher; plaintext is never stored.
    verified : bool
        ``True`` once the emailed verification code has been consumed.
    """

    __tablename__ = "users"

    login: Mapped[str] = mapped_column(String(86), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    __table_args__ = (
        UniqueConstraint("login", name="uq_users_login"),
        UniqueConstraint("email", name="uq_users_email"),
    )

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :type key: str
        :param value: Email to normalize.
        :type value: str
        :returns: Normalized email (lowercased/trimmed).
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("login")
    def _normalize_login(self, key: str, value: str) -> str:
        """Trim the login and reject blanks."""
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Login is required.")
        return value.strip()
