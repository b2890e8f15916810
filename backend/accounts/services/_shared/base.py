from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from http import HTTPStatus

from accounts.core import errors as api_errors
from accounts.services._shared.errors import (
    AlreadyExistsError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    NotVerifiedError,
    ServiceError,
    TokenExpiredError,
    UnexpectedError,
)
from accounts.services._shared.ports.clock import Clock, SystemClock
from accounts.uow.coordinator import TransactionCoordinator


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Hold the transaction coordinator every storage call goes through.
    * Provide the injectable clock.
    * Centralize error translation and logging.

    Notes
    -----
    - Services never touch the global session; they go through
      :class:`~accounts.uow.coordinator.TransactionCoordinator`.
    """

    def __init__(
        self,
        *,
        coordinator: TransactionCoordinator | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the base service.

        :param coordinator: Transaction coordinator (defaults to the Flask-scoped one).
        :type coordinator: TransactionCoordinator | None
        :param clock: Time source (defaults to the system clock).
        :type clock: Clock | None
        :param logger: Logger used for operation-tagged diagnostics.
        :type logger: logging.Logger | None
        """
        self.tx = coordinator or TransactionCoordinator()
        self.clock = clock or SystemClock()
        self.log = logger or logging.getLogger(type(self).__module__)

    def now_utc(self) -> datetime:
        return self.clock.now()

    # -------------------------- Logging helpers -----------------------------

    def _warn(self, op: str, message: str, **extra: object) -> None:
        self.log.warning(message, extra={"op": op, **extra})

    def _unexpected(self, op: str, exc: BaseException) -> UnexpectedError:
        """Log ``exc`` with its operation tag and wrap it as :class:`UnexpectedError`."""
        self.log.error("Unexpected failure", extra={"op": op}, exc_info=exc)
        return UnexpectedError(op)

    @contextmanager
    def operation(self, op: str) -> Iterator[None]:
        """
        Classify failures raised by one service operation.

        Service errors propagate unchanged (logged as warnings); anything else,
        repository errors included, is logged with its cause and re-raised as
        :class:`UnexpectedError`.

        :param op: Operation tag, e.g. ``"sessions.sign_in"``.
        :type op: str
        """
        try:
            yield
        except ServiceError as exc:
            self._warn(op, f"{type(exc).__name__}: {exc}")
            raise
        except Exception as exc:
            raise self._unexpected(op, exc) from exc

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(
        exc: Exception, *, not_found_status: int = HTTPStatus.UNAUTHORIZED
    ) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :param not_found_status: Status used for :class:`NotFoundError`
            (``401`` for credential/token flows, ``400`` for code verification).
        :type not_found_status: int
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, InvalidCredentialsError):
            return api_errors.Unauthorized("Invalid credentials", code="invalid_credentials")

        if isinstance(exc, NotFoundError):
            if not_found_status == HTTPStatus.UNAUTHORIZED:
                return api_errors.Unauthorized("Not authenticated", code="not_authenticated")
            return api_errors.APIError(
                message=str(exc),
                status_code=not_found_status,
                code="not_found" if not_found_status == HTTPStatus.NOT_FOUND else "invalid_code",
            )

        if isinstance(exc, TokenExpiredError):
            return api_errors.Unauthorized(str(exc), code="token_expired")

        if isinstance(exc, InvalidTokenError):
            return api_errors.Unauthorized(str(exc), code="invalid_token")

        if isinstance(exc, AlreadyExistsError):
            return api_errors.Conflict(str(exc), code="already_exists")

        if isinstance(exc, NotVerifiedError):
            return api_errors.Forbidden(str(exc), code="not_verified")

        if isinstance(exc, UnexpectedError):
            return api_errors.APIError(
                message="Unexpected error",
                status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                code="internal_server_error",
            )

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
