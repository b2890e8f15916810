"""Object graph of the accounts subsystem, built once per application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

from flask import Flask, current_app

from accounts.core import extensions
from accounts.core.config import AuthSettings
from accounts.infra.hashing import HmacTokenHasher, WerkzeugPasswordHasher
from accounts.infra.jwt import JWTTokenSigner
from accounts.infra.mail import SMTPNotifier
from accounts.infra.ratelimit import LimitsRateCounter
from accounts.services._shared.ports import (
    Clock,
    Notifier,
    RateCounter,
    RecordingNotifier,
    SystemClock,
)
from accounts.services.sessions import SessionService
from accounts.uow.coordinator import TransactionCoordinator

EXTENSION_KEY = "accounts"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(slots=True)
class AccountsContainer:
    """
    Collaborators shared by the request layer and the CLI.

    :ivar settings: Session lifetimes and grace window.
    :ivar clock: Time source shared by signers and the service.
    :ivar notifier: Delivery channel for verification codes.
    :ivar rate_counter: Counter backing ``rate_limited`` (``None`` disables limiting).
    :ivar sessions: The session service.
    """

    settings: AuthSettings
    clock: Clock
    notifier: Notifier
    rate_counter: RateCounter | None
    sessions: SessionService


def _build_notifier(app: Flask) -> Notifier:
    """
    Return the SMTP notifier, or an in-memory outbox under ``TESTING``.

    :raises ValueError: If ``SMTP_HOST`` is empty outside testing.
    """
    host = app.config.get("SMTP_HOST")
    if not host:
        if app.config.get("TESTING"):
            return RecordingNotifier()
        raise ValueError("SMTP_HOST must be set outside testing.")
    return SMTPNotifier(
        host=host,
        port=int(app.config["SMTP_PORT"]),
        from_address=app.config["SMTP_FROM_ADDRESS"],
        username=app.config.get("SMTP_USERNAME", ""),
        password=app.config.get("SMTP_PASSWORD", ""),
        timeout=app.config["SMTP_TIMEOUT"],
    )


def build_container(app: Flask, *, clock: Clock | None = None) -> AccountsContainer:
    """
    Assemble the session service and its collaborators from ``app.config``.

    :param app: Configured application.
    :param clock: Optional time source override.
    :raises ValueError: If both signing contexts share one secret.
    """
    config = app.config
    if config["JWT_ACCESS_SECRET"] == config["JWT_REFRESH_SECRET"]:
        raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ.")

    settings = AuthSettings.from_mapping(config)
    clock = clock or SystemClock()
    algorithm = config.get("JWT_ALGORITHM", "HS256")
    notifier = _build_notifier(app)
    rate_counter = (
        LimitsRateCounter.from_redis(config["REDIS_URL"], extensions.get_redis())
        if extensions.redis_client is not None
        else None
    )

    sessions = SessionService(
        access_signer=JWTTokenSigner(
            secret=config["JWT_ACCESS_SECRET"],
            token_type=ACCESS_TOKEN_TYPE,
            algorithm=algorithm,
            clock=clock,
        ),
        refresh_signer=JWTTokenSigner(
            secret=config["JWT_REFRESH_SECRET"],
            token_type=REFRESH_TOKEN_TYPE,
            algorithm=algorithm,
            clock=clock,
        ),
        password_hasher=WerkzeugPasswordHasher(method=config["PASSWORD_HASH_METHOD"]),
        token_hasher=HmacTokenHasher(pepper=config["REFRESH_TOKEN_PEPPER"]),
        notifier=notifier,
        settings=settings,
        coordinator=TransactionCoordinator(statement_timeout=settings.db_timeout),
        clock=clock,
    )
    return AccountsContainer(
        settings=settings,
        clock=clock,
        notifier=notifier,
        rate_counter=rate_counter,
        sessions=sessions,
    )


def init_app(app: Flask) -> None:
    """Store the container under ``app.extensions["accounts"]``."""
    app.extensions[EXTENSION_KEY] = build_container(app)


def get_container() -> AccountsContainer:
    """Return the container of the current application."""
    return cast(AccountsContainer, current_app.extensions[EXTENSION_KEY])


def get_session_service() -> SessionService:
    return get_container().sessions
