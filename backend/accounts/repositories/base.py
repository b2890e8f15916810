"""Generic repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Session injection (Unit of Work scope) with a Flask-scoped fallback.
- Translation of driver failures into :mod:`accounts.repositories.errors`.
- Dialect-aware ``INSERT ... ON CONFLICT DO UPDATE`` for upserts.
- No business logic, no commit/rollback; the transaction coordinator owns
  transactions.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import InstrumentedAttribute, Session

from accounts.core.extensions import db
from accounts.repositories.errors import RecordExists, RepositoryError

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single table.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.
    * ``name``: table-level prefix used in operation tags.

    This class NEVER:

    * opens/commits/rolls back transactions,
    * implements business rules or cross-table coordination.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]
    #: Prefix for operation tags, e.g. ``"users"``
    name: str = "repository"

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``accounts.core.extensions``.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        """Return the active SQLAlchemy session.

        :returns: Active session bound to the current Unit of Work.
        :rtype: :class:`sqlalchemy.orm.Session`
        """
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Error translation ------------------------

    def _op(self, action: str) -> str:
        return f"{self.name}.{action}"

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        """Wrap driver errors raised inside the block with the operation tag.

        Unique-constraint violations become :class:`RecordExists`; any other
        :class:`~sqlalchemy.exc.SQLAlchemyError` becomes
        :class:`RepositoryError`. The original exception is chained.

        :param action: Operation name appended to the repository prefix.
        :type action: str
        :raises RecordExists: On ``IntegrityError``.
        :raises RepositoryError: On any other SQLAlchemy error.
        """
        op = self._op(action)
        try:
            yield
        except IntegrityError as exc:
            raise RecordExists(op) from exc
        except SQLAlchemyError as exc:
            raise RepositoryError(op, exc.__class__.__name__) from exc

    # ------------------------------ Upsert -----------------------------------

    def _upsert(
        self,
        values: Mapping[str, Any],
        *,
        conflict_columns: Sequence[str],
        update_columns: Sequence[str],
    ) -> None:
        """Insert a row or overwrite ``update_columns`` on key conflict.

        Uses the native ``ON CONFLICT`` clause on PostgreSQL and SQLite. Other
        dialects fall back to a locking read followed by insert or update in
        the current transaction.

        :param values: Column → value mapping of the row.
        :type values: Mapping[str, Any]
        :param conflict_columns: Columns of the unique key resolving conflicts.
        :type conflict_columns: Sequence[str]
        :param update_columns: Columns overwritten when the key already exists.
        :type update_columns: Sequence[str]
        """
        dialect = self.session.get_bind().dialect.name
        table = self.model.__table__  # type: ignore[attr-defined]

        if dialect in ("postgresql", "sqlite"):
            insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
            stmt = insert(table).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=list(conflict_columns),
                set_={col: stmt.excluded[col] for col in update_columns},
            )
            self.session.execute(stmt)
            return

        criteria = [
            cast(InstrumentedAttribute[Any], getattr(self.model, col)) == values[col]
            for col in conflict_columns
        ]
        existing = (
            self.session.execute(select(self.model).where(*criteria).with_for_update())
            .scalars()
            .first()
        )
        if existing is None:
            self.session.add(self.model(**values))
        else:
            for col in update_columns:
                setattr(existing, col, values[col])
        self.session.flush()

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity for persistence and flush to materialize the PK.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        :raises RecordExists: When a unique constraint rejects the row.
        """
        with self._guard("add"):
            self.session.add(instance)
            self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :param entity_id: Primary-key value.
        :type entity_id: Any
        :returns: Entity or ``None``.
        :rtype: E | None
        """
        with self._guard("get"):
            return cast(E | None, self.session.get(self.model, entity_id))

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        with self._guard("flush"):
            self.session.flush()
