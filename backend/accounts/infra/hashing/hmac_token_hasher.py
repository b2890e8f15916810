from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass

from accounts.services._shared.ports import CredentialHasher


@dataclass(frozen=True, slots=True)
class HmacTokenHasher(CredentialHasher):
    """
    Deterministic keyed hash for refresh tokens.

    Refresh records are looked up *by* hash, so the transform must not be
    salted per value. The pepper keeps a leaked table from being matched
    against tokens minted elsewhere.

    :param pepper: Server-side HMAC key.
    """

    pepper: str

    def hash(self, secret: str) -> str:
        return hmac.new(
            self.pepper.encode("utf-8"), secret.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def verify(self, secret: str, stored: str) -> bool:
        return hmac.compare_digest(self.hash(secret), stored)
