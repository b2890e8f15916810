from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from accounts.models import RefreshToken
from accounts.repositories import RecordExists, RefreshTokenRepository

from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def repo(session):
    return RefreshTokenRepository(session=session)


def _upsert(repo, user_id, device_id, token_hash, *, days=30):
    repo.upsert(
        user_id=user_id,
        device_id=device_id,
        token_hash=token_hash,
        expires_at=NOW + timedelta(days=days),
        created_at=NOW,
    )


class TestRefreshTokenRepository:
    def test_upsert_overwrites_same_device(self, repo, session):
        user = UserFactory()

        _upsert(repo, user.id, "d1", "hash-1")
        _upsert(repo, user.id, "d1", "hash-2", days=10)
        session.commit()

        rows = repo.list_for_user(user.id)
        assert len(rows) == 1
        assert rows[0].token_hash == "hash-2"
        assert rows[0].expires_at == NOW + timedelta(days=10)

    def test_devices_are_independent(self, repo, session):
        user = UserFactory()

        _upsert(repo, user.id, "d1", "hash-1")
        _upsert(repo, user.id, "d2", "hash-2")
        session.commit()

        assert [r.device_id for r in repo.list_for_user(user.id)] == ["d1", "d2"]

    def test_hash_collision_is_reported(self, repo, session):
        existing = RefreshTokenFactory(token_hash="same")

        with pytest.raises(RecordExists):
            _upsert(repo, existing.user_id, "another-device", "same")
        session.rollback()

    def test_get_and_delete_by_hash(self, repo, session):
        record = RefreshTokenFactory(token_hash="abc")

        assert repo.get_by_hash("abc").id == record.id
        assert repo.get_by_hash("missing") is None

        assert repo.delete_by_hash("abc") == 1
        assert repo.delete_by_hash("abc") == 0
        session.commit()
        assert session.query(RefreshToken).count() == 0

    def test_purge_expired(self, repo, session):
        RefreshTokenFactory(created_at=NOW - timedelta(days=31))
        keep = RefreshTokenFactory(created_at=NOW)

        assert repo.purge_expired(NOW) == 1
        session.commit()
        assert [r.id for r in session.query(RefreshToken).all()] == [keep.id]
