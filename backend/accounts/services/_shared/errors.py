"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask, HTTP or
SQLAlchemy. They are the stable contract between the session service and its
callers; only the *kind* of error crosses the HTTP boundary.

The translation to HTTP responses (RFC 7807) is handled by
``accounts/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer or BaseService translates them to APIError.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when the record an operation needs does not exist (or is unusable).

    :param entity: Entity name (e.g., "VerificationCode").
    :type entity: str
    """

    entity: str

    def __str__(self) -> str:
        return f"{self.entity} not found"


class InvalidCredentialsError(NotFoundError):
    """Raised when no user matches a login/password pair."""

    def __init__(self) -> None:
        super().__init__("User")

    def __str__(self) -> str:
        return "Invalid credentials"


@dataclass(slots=True)
class AlreadyExistsError(ServiceError):
    """
    Raised when an account with the same identity already exists.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    """

    entity: str

    def __str__(self) -> str:
        return f"{self.entity} already exists"


class NotVerifiedError(ServiceError):
    """Raised when an unverified account attempts to sign in."""

    def __init__(self, message: str = "Account is not verified") -> None:
        super().__init__(message)


class TokenExpiredError(ServiceError):
    """Raised when a refresh record has passed its expiry."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """Raised when a token is malformed, forged, expired or from another context."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class UnexpectedError(ServiceError):
    """
    Raised when storage or collaborators fail in an unforeseen way.

    :param op: Operation tag where the failure surfaced.
    :type op: str
    """

    def __init__(self, op: str) -> None:
        self.op = op
        super().__init__(f"Unexpected failure in {op}")
