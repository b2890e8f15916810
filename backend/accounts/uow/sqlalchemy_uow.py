"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from datetime import timedelta
from typing import cast

from sqlalchemy import text
from sqlalchemy.orm import Session

from accounts.core.extensions import db
from accounts.repositories import (
    RefreshTokenRepository,
    UserRepository,
    VerificationCodeRepository,
)
from accounts.uow.base import NestedUnitOfWorkError, UnitOfWork

_ACTIVE_FLAG = "accounts.uow_active"


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.verification_codes = VerificationCodeRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent transaction.

    Parameters
    ----------
    session:
        Session to bind. Defaults to the Flask-scoped ``db.session``.
    statement_timeout:
        Optional deadline applied with ``SET LOCAL statement_timeout`` on
        PostgreSQL. Other dialects rely on the engine's pool/connect timeouts.

    Notes
    -----
    Scopes do not nest: entering a second UoW on a session that already has
    one active raises :class:`NestedUnitOfWorkError`.
    """

    def __init__(
        self,
        *,
        session: Session | None = None,
        statement_timeout: timedelta | None = None,
    ) -> None:
        super().__init__(session=session if session is not None else cast(Session, db.session))
        self.statement_timeout = statement_timeout

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        if self.session.info.get(_ACTIVE_FLAG):
            raise NestedUnitOfWorkError("A unit of work is already active on this session.")
        self.session.info[_ACTIVE_FLAG] = True
        try:
            self._apply_deadline()
        except Exception:
            self.session.info.pop(_ACTIVE_FLAG, None)
            self.session.rollback()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                try:
                    self.commit()
                except Exception:
                    self.rollback()
                    raise
            else:
                self.rollback()
        finally:
            self.session.info.pop(_ACTIVE_FLAG, None)

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def _apply_deadline(self) -> None:
        if self.statement_timeout is None:
            return
        if self.session.get_bind().dialect.name != "postgresql":
            return
        ms = int(self.statement_timeout.total_seconds() * 1000)
        # SET LOCAL does not accept bind parameters.
        self.session.execute(text(f"SET LOCAL statement_timeout = {ms}"))
