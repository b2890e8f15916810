"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
redis_client: redis.Redis | None = None


def _apply_engine_deadlines(app: Flask) -> None:
    """Bound connection checkout and connect time by ``DB_WRITE_TIMEOUT``.

    File-backed SQLite gets the same deadline as its busy timeout (how long a
    writer waits for another connection's lock). In-memory SQLite is left
    untouched.
    """
    uri = str(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
    timeout = app.config.get("DB_WRITE_TIMEOUT")
    seconds = int(timeout.total_seconds()) if timeout else 5
    options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
    if uri.startswith("sqlite"):
        if ":memory:" in uri or uri.rstrip("/") in ("sqlite:", "sqlite://"):
            return
        connect_args = dict(options.get("connect_args") or {})
        connect_args.setdefault("timeout", seconds)
        options["connect_args"] = connect_args
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = options
        return
    options.setdefault("pool_pre_ping", True)
    options.setdefault("pool_timeout", seconds)
    if uri.startswith("postgresql"):
        connect_args = dict(options.get("connect_args") or {})
        connect_args.setdefault("connect_timeout", seconds)
        options["connect_args"] = connect_args
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = options


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations and the optional Redis client.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`accounts.models` package to ensure SQLAlchemy metadata is ready
        for migrations.
    """
    _apply_engine_deadlines(app)
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from accounts import models as _models  # noqa: F401

    migrate.init_app(app, db)

    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    timeout = app.config.get("DB_WRITE_TIMEOUT")
    socket_timeout = timeout.total_seconds() if timeout else 5.0
    redis_client = redis.Redis.from_url(
        redis_url,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client


def get_redis() -> redis.Redis:
    """Return the initialized Redis client."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return redis_client
