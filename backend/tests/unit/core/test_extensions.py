from __future__ import annotations

from datetime import timedelta

import pytest
from accounts.core.extensions import _apply_engine_deadlines
from flask import Flask


def _configured(uri, **extra):
    app = Flask(__name__)
    app.config.update(SQLALCHEMY_DATABASE_URI=uri, DB_WRITE_TIMEOUT=timedelta(seconds=3), **extra)
    _apply_engine_deadlines(app)
    return app.config.get("SQLALCHEMY_ENGINE_OPTIONS")


def test_file_sqlite_gets_busy_timeout(tmp_path):
    options = _configured(
        f"sqlite:///{tmp_path / 'a.db'}",
        SQLALCHEMY_ENGINE_OPTIONS={"connect_args": {"check_same_thread": False}},
    )

    assert options["connect_args"] == {"check_same_thread": False, "timeout": 3}


@pytest.mark.parametrize("uri", ["sqlite:///:memory:", "sqlite://"])
def test_in_memory_sqlite_is_untouched(uri):
    assert not _configured(uri)


def test_postgres_gets_pool_and_connect_deadlines():
    options = _configured("postgresql+psycopg://u:p@db/accounts")

    assert options["pool_timeout"] == 3
    assert options["pool_pre_ping"] is True
    assert options["connect_args"]["connect_timeout"] == 3
