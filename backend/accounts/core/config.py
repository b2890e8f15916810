"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_seconds(name: str, default: float) -> timedelta:
    """Parse a duration expressed in seconds from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: float
        Number of seconds used when the variable is unset or blank.

    Returns
    -------
    datetime.timedelta
        Parsed duration.

    Raises
    ------
    ValueError
        If the variable is set to something that is not a number.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return timedelta(seconds=default)
    return timedelta(seconds=float(val))


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder.
    JWT_ACCESS_SECRET: str
        Signing key of the access-token context.
    JWT_REFRESH_SECRET: str
        Signing key of the refresh-token context. Must differ from the access
        key so tokens are not interchangeable between contexts.
    JWT_ALGORITHM: str
        HMAC algorithm shared by both signing contexts.
    REFRESH_TOKEN_PEPPER: str
        Server-side secret mixed into stored refresh-token hashes.
    PASSWORD_HASH_METHOD: str
        Method string forwarded to :func:`werkzeug.security.generate_password_hash`.
    ACCESS_TOKEN_TTL: timedelta
        Lifetime of access tokens.
    REFRESH_TOKEN_TTL: timedelta
        Lifetime of refresh tokens (the device session).
    VERIFICATION_CODE_TTL: timedelta
        Lifetime of an emailed verification code.
    REFRESH_ROTATION_GRACE: timedelta
        Remaining refresh lifetime under which a refresh call rotates the
        whole session instead of reusing the refresh token.
    DB_WRITE_TIMEOUT: timedelta
        Deadline applied to every storage transaction.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        Optional Redis endpoint backing the rate-limit counters.
    AUTH_RATE_LIMIT: int
        Requests allowed per client and endpoint in one window.
    AUTH_RATE_WINDOW: timedelta
        Length of the rate-limit window.
    SMTP_HOST, SMTP_PORT, SMTP_USERNAME, SMTP_PASSWORD, SMTP_FROM_ADDRESS:
        Outbound mail settings. ``SMTP_HOST`` is required outside testing;
        under ``TESTING`` an empty host keeps mail in memory.
    SMTP_TIMEOUT: timedelta
        Socket timeout for SMTP conversations.
    USE_PROXYFIX: bool
        Trust one hop of ``X-Forwarded-*`` headers (behind a reverse proxy).
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "CHANGE_ME_ACCESS")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "CHANGE_ME_REFRESH")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    REFRESH_TOKEN_PEPPER = os.getenv("REFRESH_TOKEN_PEPPER", "CHANGE_ME_PEPPER")
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # Sessions
    ACCESS_TOKEN_TTL = env_seconds("ACCESS_TOKEN_TTL", 15 * 60)
    REFRESH_TOKEN_TTL = env_seconds("REFRESH_TOKEN_TTL", 30 * 24 * 3600)
    VERIFICATION_CODE_TTL = env_seconds("VERIFICATION_CODE_TTL", 15 * 60)
    REFRESH_ROTATION_GRACE = env_seconds("REFRESH_ROTATION_GRACE", 7 * 24 * 3600)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    DB_WRITE_TIMEOUT = env_seconds("DB_WRITE_TIMEOUT", 5)

    # Rate limiting
    REDIS_URL = os.getenv("REDIS_URL") or None
    AUTH_RATE_LIMIT = int(os.getenv("AUTH_RATE_LIMIT", "10"))
    AUTH_RATE_WINDOW = env_seconds("AUTH_RATE_WINDOW", 60)

    # Mail
    SMTP_HOST = os.getenv("SMTP_HOST", "")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
    SMTP_FROM_ADDRESS = os.getenv("SMTP_FROM_ADDRESS", "no-reply@localhost")
    SMTP_TIMEOUT = env_seconds("SMTP_TIMEOUT", 10)

    # Proxy
    USE_PROXYFIX = env_bool("USE_PROXYFIX", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    # Local mail catcher (e.g. MailHog) unless overridden
    SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "1025"))


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Disables SMTP and Redis so tests never leave the process.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    REDIS_URL = None
    SMTP_HOST = ""


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable snapshot of the session-related configuration.

    :param access_ttl: Access token lifetime.
    :type access_ttl: timedelta
    :param refresh_ttl: Refresh token lifetime.
    :type refresh_ttl: timedelta
    :param code_ttl: Verification code lifetime.
    :type code_ttl: timedelta
    :param rotation_grace: Remaining refresh lifetime that triggers a full rotation.
    :type rotation_grace: timedelta
    :param db_timeout: Deadline for a single storage transaction.
    :type db_timeout: timedelta
    """

    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=30)
    code_ttl: timedelta = timedelta(minutes=15)
    rotation_grace: timedelta = timedelta(days=7)
    db_timeout: timedelta = timedelta(seconds=5)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthSettings:
        """Build settings from a Flask config mapping, keeping defaults for missing keys."""
        defaults = cls()
        return cls(
            access_ttl=config.get("ACCESS_TOKEN_TTL", defaults.access_ttl),
            refresh_ttl=config.get("REFRESH_TOKEN_TTL", defaults.refresh_ttl),
            code_ttl=config.get("VERIFICATION_CODE_TTL", defaults.code_ttl),
            rotation_grace=config.get("REFRESH_ROTATION_GRACE", defaults.rotation_grace),
            db_timeout=config.get("DB_WRITE_TIMEOUT", defaults.db_timeout),
        )
