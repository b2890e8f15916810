"""Pytest fixtures configuring an isolated database per test.

Each test gets a fresh application bound to its own in-memory SQLite
database. Units of work really commit and roll back, so the suite exercises
transaction boundaries instead of hiding them behind SAVEPOINTs.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest
from accounts.core.config import AuthSettings, TestingConfig
from accounts.core.extensions import db as _db  # Flask-SQLAlchemy instance
from accounts.factory import create_app  # application factory under test
from accounts.infra.hashing import HmacTokenHasher, WerkzeugPasswordHasher
from accounts.infra.jwt import JWTTokenSigner
from accounts.services._shared.ports import FrozenClock, RecordingNotifier
from accounts.services.sessions import SessionService


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Avoids hitting external services (no SMTP, no Redis).
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_ACCESS_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"
    REFRESH_TOKEN_PEPPER = "test-pepper"
    LOG_LEVEL = "WARNING"


@pytest.fixture
def app():
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestConfig` applied, an active app context
        and freshly created tables.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    """Database extension bound to the testing application."""
    return _db


@pytest.fixture
def session(db):
    """Flask-scoped SQLAlchemy session used by repositories and factories."""
    return db.session


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Session service wiring ------------------------------------------------------


@pytest.fixture
def clock():
    """Manually driven clock shared by the service and both signers."""
    return FrozenClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def settings():
    return AuthSettings(
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=30),
        code_ttl=timedelta(minutes=15),
        rotation_grace=timedelta(days=7),
    )


@pytest.fixture
def access_signer(clock):
    return JWTTokenSigner(secret="test-access-secret", token_type="access", clock=clock)


@pytest.fixture
def refresh_signer(clock):
    return JWTTokenSigner(secret="test-refresh-secret", token_type="refresh", clock=clock)


@pytest.fixture
def password_hasher():
    return WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


@pytest.fixture
def token_hasher():
    return HmacTokenHasher(pepper="test-pepper")


@pytest.fixture
def service(
    app, clock, notifier, settings, access_signer, refresh_signer, password_hasher, token_hasher
):
    """:class:`SessionService` driven by the frozen clock and recording notifier."""
    return SessionService(
        access_signer=access_signer,
        refresh_signer=refresh_signer,
        password_hasher=password_hasher,
        token_hasher=token_hasher,
        notifier=notifier,
        settings=settings,
        clock=clock,
    )


# -- Hook up Factory Boy to the test session -----------------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper to the per-test session, when a test uses one."""
    from tests.factories import SQLAlchemySession

    if "app" not in request.fixturenames:
        yield
        return
    SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
