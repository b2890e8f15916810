"""Tests for the User model."""

from __future__ import annotations

import pytest
from accounts.models import User
from sqlalchemy.exc import IntegrityError


class TestUser:
    def test_email_normalized_and_unique(self, session):
        u1 = User(login="alice", email="  Alice@Example.com ", password_hash="h")
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"
        assert u1.verified is False

        session.add(User(login="alice2", email="alice@example.com", password_hash="h"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_login_unique(self, session):
        session.add(User(login="bob", email="b1@example.com", password_hash="h"))
        session.commit()

        session.add(User(login="bob", email="b2@example.com", password_hash="h"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_login_is_trimmed(self):
        assert User(login="  carol ", email="c@example.com", password_hash="h").login == "carol"

    @pytest.mark.parametrize("email", ["", "no-at-sign"])
    def test_email_validation(self, email):
        with pytest.raises(ValueError):
            User(login="u", email=email, password_hash="h")

    def test_blank_login_rejected(self):
        with pytest.raises(ValueError):
            User(login="   ", email="d@example.com", password_hash="h")

    def test_timestamps_filled_by_database(self, session):
        u = User(login="dave", email="dave@example.com", password_hash="h")
        session.add(u)
        session.commit()

        assert u.created_at.tzinfo is not None
        assert u.updated_at is not None
