"""User repository for persistence and lookup utilities."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select, update

from accounts.models.user import User
from accounts.repositories.base import BaseRepository
from accounts.repositories.errors import RecordNotFound


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes passwords nor issues tokens; callers hand in the stored
    password form produced by the credential hasher.
    """

    model = User
    name = "users"

    def create(self, *, login: str, email: str, password_hash: str) -> User:
        """Insert a new unverified user and flush to obtain its id.

        :param login: Unique sign-in handle.
        :type login: str
        :param email: Unique email (normalized by the model).
        :type email: str
        :param password_hash: Stored password form.
        :type password_hash: str
        :returns: Persisted user.
        :rtype: User
        :raises RecordExists: When the login or email is already taken.
        """
        user = User(login=login, email=email, password_hash=password_hash, verified=False)
        with self._guard("create"):
            self.session.add(user)
            self.session.flush()
        return user

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        with self._guard("get_by_email"):
            return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_login(self, login: str) -> User | None:
        """Fetch a user by its exact login.

        :param login: Login to search (surrounding whitespace ignored).
        :type login: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.login == login.strip())
        with self._guard("get_by_login"):
            return cast(User | None, self.session.execute(stmt).scalars().first())

    def mark_verified(self, user_id: int) -> None:
        """Flip the ``verified`` flag of a user.

        :param user_id: Identifier of the user.
        :type user_id: int
        :raises RecordNotFound: If no row was updated.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(verified=True)
            .execution_options(synchronize_session="fetch")
        )
        with self._guard("mark_verified"):
            result = self.session.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise RecordNotFound(self._op("mark_verified"))
