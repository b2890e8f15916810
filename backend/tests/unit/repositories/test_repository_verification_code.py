from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from accounts.models import VerificationCode
from accounts.repositories import VerificationCodeRepository

from tests.factories.user import UserFactory
from tests.factories.verification_code import VerificationCodeFactory

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def repo(session):
    return VerificationCodeRepository(session=session)


class TestVerificationCodeRepository:
    def test_upsert_keeps_one_row_per_user(self, repo, session):
        user = UserFactory(verified=False)

        repo.upsert(user_id=user.id, code="AAAAAA", expires_at=NOW + timedelta(minutes=15))
        repo.upsert(user_id=user.id, code="BBBBBB", expires_at=NOW + timedelta(minutes=30))
        session.commit()

        rows = session.query(VerificationCode).filter_by(user_id=user.id).all()
        assert len(rows) == 1
        assert rows[0].code == "BBBBBB"
        assert rows[0].expires_at == NOW + timedelta(minutes=30)

    def test_get_live_for_update_skips_expired_and_unknown(self, repo):
        VerificationCodeFactory(code="LIVE01", expires_at=NOW + timedelta(seconds=1))
        VerificationCodeFactory(code="DEAD01", expires_at=NOW)

        assert repo.get_live_for_update("LIVE01", NOW).code == "LIVE01"
        assert repo.get_live_for_update("DEAD01", NOW) is None
        assert repo.get_live_for_update("NOPE01", NOW) is None

    def test_consume_deletes_exactly_once(self, repo, session):
        row = VerificationCodeFactory(code="ONCE01", expires_at=NOW + timedelta(minutes=5))
        row_id = row.id

        assert repo.consume(code_id=row_id, code="ONCE01") == 1
        assert repo.consume(code_id=row_id, code="ONCE01") == 0
        session.commit()

        assert session.get(VerificationCode, row_id) is None

    def test_consume_requires_matching_code(self, repo):
        row = VerificationCodeFactory(code="FIRST1", expires_at=NOW + timedelta(minutes=5))

        assert repo.consume(code_id=row.id, code="OTHER1") == 0

    def test_purge_expired(self, repo, session):
        VerificationCodeFactory(expires_at=NOW - timedelta(minutes=1))
        VerificationCodeFactory(expires_at=NOW)
        keep = VerificationCodeFactory(expires_at=NOW + timedelta(minutes=1))

        assert repo.purge_expired(NOW) == 2
        session.commit()

        remaining = session.query(VerificationCode).all()
        assert [r.id for r in remaining] == [keep.id]
