"""
Persistence-level exceptions raised by repositories.

Repositories translate driver failures into these types so services never
need to inspect SQLAlchemy exceptions. Every error carries the operation tag
(``"users.create"``, ``"refresh_tokens.upsert"``...) it was raised from.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """
    Storage failure wrapped with the repository operation that raised it.

    :param op: Operation tag, e.g. ``"users.create"``.
    :type op: str
    :param message: Optional human-readable description.
    :type message: str | None
    """

    def __init__(self, op: str, message: str | None = None) -> None:
        self.op = op
        super().__init__(f"{op}: {message or 'storage error'}")


class RecordNotFound(RepositoryError):
    """Raised when a row expected by the operation does not exist."""

    def __init__(self, op: str) -> None:
        super().__init__(op, "record not found")


class RecordExists(RepositoryError):
    """Raised when an insert collides with a unique constraint."""

    def __init__(self, op: str) -> None:
        super().__init__(op, "record already exists")
