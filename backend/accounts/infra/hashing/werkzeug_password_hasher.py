from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from accounts.services._shared.ports import CredentialHasher


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(CredentialHasher):
    """
    Salted password hashing backed by :mod:`werkzeug.security`.

    The stored form embeds method and salt, so :meth:`verify` keeps working
    after ``method`` changes.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or ``"pbkdf2:sha256"``.
    """

    method: str = "scrypt"

    def hash(self, secret: str) -> str:
        return generate_password_hash(secret, method=self.method)

    def verify(self, secret: str, stored: str) -> bool:
        return check_password_hash(stored, secret)
