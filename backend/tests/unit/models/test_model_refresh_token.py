"""Tests for the RefreshToken and VerificationCode models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from accounts.models import RefreshToken, VerificationCode
from sqlalchemy.exc import IntegrityError, StatementError

from tests.factories.user import UserFactory

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def _token(user_id, device_id, token_hash):
    return RefreshToken(
        user_id=user_id,
        device_id=device_id,
        token_hash=token_hash,
        created_at=NOW,
        expires_at=NOW + timedelta(days=30),
    )


class TestRefreshToken:
    def test_one_record_per_device(self, session):
        user = UserFactory()
        session.add(_token(user.id, "d1", "h1"))
        session.commit()

        session.add(_token(user.id, "d1", "h2"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_token_hash_unique_across_users(self, session):
        alice, bob = UserFactory(), UserFactory()
        session.add(_token(alice.id, "d1", "same"))
        session.commit()

        session.add(_token(bob.id, "d2", "same"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_datetimes_come_back_as_utc(self, session):
        user = UserFactory()
        row = _token(user.id, "d1", "h1")
        session.add(row)
        session.commit()
        session.expire_all()

        stored = session.get(RefreshToken, row.id)
        assert stored.expires_at == NOW + timedelta(days=30)
        assert stored.expires_at.tzinfo is not None

    def test_naive_datetimes_rejected(self, session):
        user = UserFactory()
        row = _token(user.id, "d1", "h1")
        row.expires_at = datetime(2024, 1, 1)
        session.add(row)
        with pytest.raises(StatementError, match="timezone-aware"):
            session.commit()
        session.rollback()


class TestVerificationCode:
    def test_one_code_per_user(self, session):
        user = UserFactory(verified=False)
        session.add(VerificationCode(user_id=user.id, code="abc123", expires_at=NOW))
        session.commit()

        session.add(VerificationCode(user_id=user.id, code="xyz789", expires_at=NOW))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()
