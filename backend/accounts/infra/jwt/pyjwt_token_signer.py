# accounts/infra/jwt/pyjwt_token_signer.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, cast
from uuid import uuid4

import jwt

from accounts.services._shared.errors import InvalidTokenError
from accounts.services._shared.ports import Clock, SystemClock, TokenSigner

SUPPORTED_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


@dataclass(slots=True)
class JWTTokenSigner(TokenSigner):
    """
    PyJWT adapter for one signing context.

    Claims: ``sub`` (string subject), ``type`` (context name), ``jti``,
    ``iat`` and ``exp``. Expiry is checked against the injected clock rather
    than the wall clock, so the signer and the session store agree on "now".

    :param secret: HMAC key of this context.
    :param token_type: Context name embedded as the ``type`` claim.
    :param algorithm: HMAC algorithm (``HS256`` by default).
    :param clock: Time source for ``iat``/``exp``.
    """

    secret: str
    token_type: str
    algorithm: str = "HS256"
    clock: Clock = field(default_factory=SystemClock)

    def __post_init__(self) -> None:
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm: {self.algorithm!r}")
        if not self.secret:
            raise ValueError(f"Empty signing secret for {self.token_type!r} tokens.")

    def issue(self, subject: str, ttl: timedelta) -> str:
        now = self.clock.now()
        payload: dict[str, Any] = {
            "sub": subject,
            "type": self.token_type,
            "jti": uuid4().hex,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        return cast(str, jwt.encode(payload, self.secret, algorithm=self.algorithm))

    def verify(self, token: str) -> str:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "require": ["exp", "iat", "sub"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError() from exc

        if claims.get("type") != self.token_type:
            raise InvalidTokenError("Token belongs to another context")
        if int(claims["exp"]) <= int(self.clock.now().timestamp()):
            raise InvalidTokenError("Token has expired")
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Token has no subject")
        return subject
