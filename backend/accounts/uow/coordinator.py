"""
Transaction coordinator: the single entry point services use to reach storage.

Two execution modes are offered:

* **scoped**: :meth:`TransactionCoordinator.run` hands a callable the
  repositories of one Unit of Work; a normal return commits, any exception
  rolls back and propagates unchanged.
* **autocommit**: :attr:`TransactionCoordinator.store` exposes the same
  repositories, but every method call runs in its own committed transaction.

The session never escapes either mode.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

from accounts.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

T = TypeVar("T")

UnitOfWorkFactory = Callable[[], SQLAlchemyUnitOfWork]


class _AutocommitRepository:
    """Proxy that runs each call of one repository in a dedicated transaction."""

    def __init__(self, factory: UnitOfWorkFactory, attr: str) -> None:
        self._factory = factory
        self._attr = attr

    def __getattr__(self, method: str) -> Callable[..., Any]:
        if method.startswith("_"):
            raise AttributeError(method)

        def call(*args: Any, **kwargs: Any) -> Any:
            with self._factory() as uow:
                return getattr(getattr(uow, self._attr), method)(*args, **kwargs)

        call.__name__ = method
        return call


class AutocommitStore:
    """Account store view where each repository call commits on its own."""

    def __init__(self, factory: UnitOfWorkFactory) -> None:
        self.users = _AutocommitRepository(factory, "users")
        self.verification_codes = _AutocommitRepository(factory, "verification_codes")
        self.refresh_tokens = _AutocommitRepository(factory, "refresh_tokens")


class TransactionCoordinator:
    """
    Run account-store work atomically.

    :param uow_factory: Optional factory of Units of Work. Defaults to
        :class:`SQLAlchemyUnitOfWork` bound to the Flask-scoped session.
    :type uow_factory: Callable[[], SQLAlchemyUnitOfWork] | None
    :param statement_timeout: Deadline forwarded to every default Unit of Work.
    :type statement_timeout: timedelta | None
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory | None = None,
        statement_timeout: timedelta | None = None,
    ) -> None:
        if uow_factory is None:

            def uow_factory() -> SQLAlchemyUnitOfWork:
                return SQLAlchemyUnitOfWork(statement_timeout=statement_timeout)

        self._factory: UnitOfWorkFactory = uow_factory
        self.store = AutocommitStore(self._factory)

    def run(self, unit: Callable[[SQLAlchemyUnitOfWork], T]) -> T:
        """
        Execute ``unit`` inside one transaction.

        :param unit: Callable receiving the bound repositories.
        :type unit: Callable[[SQLAlchemyUnitOfWork], T]
        :returns: Whatever ``unit`` returns, after the commit succeeded.
        :rtype: T
        :raises NestedUnitOfWorkError: If called from inside another ``run``.
        """
        with self._factory() as uow:
            return unit(uow)
