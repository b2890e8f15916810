from __future__ import annotations

from datetime import timedelta
from typing import Protocol


class TokenSigner(Protocol):
    """
    Port for one signing context (``access`` or ``refresh``).

    Each context owns its own secret; a token issued by one context never
    verifies in the other.
    """

    token_type: str

    def issue(self, subject: str, ttl: timedelta) -> str:
        """Return a signed token for ``subject`` that expires after ``ttl``."""
        ...

    def verify(self, token: str) -> str:
        """
        Return the subject of a valid token.

        :raises InvalidTokenError: If the token is malformed, forged, expired,
            lacks a subject or belongs to another context.
        """
        ...
