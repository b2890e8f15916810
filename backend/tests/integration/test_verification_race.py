"""
Concurrent verification of one code against a file-backed SQLite database.

Each thread runs in its own application context, hence its own session and
connection. Both threads read the live row before either deletes it, so the
row-count check on the delete is what decides the winner.
"""

from __future__ import annotations

import threading

import pytest
from accounts.core.config import TestingConfig
from accounts.core.container import get_container
from accounts.core.extensions import db
from accounts.factory import create_app
from accounts.models import User, VerificationCode
from accounts.repositories import VerificationCodeRepository
from accounts.services._shared.errors import NotFoundError
from accounts.services.sessions import SignUpIn, VerifyIn

from tests.helpers.mail import code_sent_to


@pytest.fixture
def file_app(tmp_path):
    class FileConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'accounts.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False}}
        JWT_ACCESS_SECRET = "race-access-secret"
        JWT_REFRESH_SECRET = "race-refresh-secret"
        LOG_LEVEL = "WARNING"

    app = create_app(FileConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()
        db.engine.dispose()


def test_concurrent_verification_has_exactly_one_winner(file_app, monkeypatch):
    with file_app.app_context():
        container = get_container()
        user_id = container.sessions.sign_up(
            SignUpIn(login="root", email="a@b.com", password="password123")
        ).user_id
        code = code_sent_to(container.notifier, "a@b.com")

    real_read = VerificationCodeRepository.get_live_for_update
    both_have_read = threading.Barrier(2, timeout=10)

    def read_then_wait(self, code, now):
        row = real_read(self, code, now)
        both_have_read.wait()
        return row

    monkeypatch.setattr(VerificationCodeRepository, "get_live_for_update", read_then_wait)

    outcomes = []
    lock = threading.Lock()

    def attempt():
        with file_app.app_context():
            try:
                result = container.sessions.verify(VerifyIn(code=code))
            except NotFoundError as exc:
                result = exc
            with lock:
                outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert len(outcomes) == 2
    assert [o for o in outcomes if isinstance(o, int)] == [user_id]
    assert len([o for o in outcomes if isinstance(o, NotFoundError)]) == 1
    with file_app.app_context():
        assert db.session.get(User, user_id).verified is True
        assert db.session.query(VerificationCode).count() == 0
