"""Factory Boy definition for :class:`accounts.models.user.User`."""

from __future__ import annotations

import factory
from accounts.models.user import User
from werkzeug.security import generate_password_hash

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "password123"


class UserFactory(BaseFactory):
    """Build persisted, verified :class:`User` instances.

    Pass ``password=...`` to store a specific password (hashed with a cheap
    pbkdf2 setting) and ``verified=False`` for pending accounts.
    """

    class Meta:
        model = User
        exclude = ("password",)

    id = None  # let autoincrement handle it
    login = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    verified = True
    password = DEFAULT_PASSWORD
    password_hash = factory.LazyAttribute(
        lambda o: generate_password_hash(o.password, method="pbkdf2:sha256:1000")
    )
