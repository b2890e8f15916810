from __future__ import annotations

from typing import Protocol


class CredentialHasher(Protocol):
    """
    One-way transform of a plaintext secret into its stored form.

    Implementations are stateless apart from their configuration.
    """

    def hash(self, secret: str) -> str: ...

    def verify(self, secret: str, stored: str) -> bool: ...
