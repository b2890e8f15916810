from __future__ import annotations

import secrets
from collections import deque
from collections.abc import Iterable
from typing import Protocol

CODE_LENGTH = 6


class CodeGenerator(Protocol):
    """Produce short, human-enterable verification codes."""

    def generate(self) -> str: ...


class RandomCodeGenerator:
    """
    URL-safe random codes of :data:`CODE_LENGTH` characters.

    Six random bytes are base64url-encoded (eight characters) and truncated,
    which keeps roughly 36 bits of entropy per code.
    """

    def __init__(self, length: int = CODE_LENGTH) -> None:
        self.length = length

    def generate(self) -> str:
        return secrets.token_urlsafe(6)[: self.length]


class SequenceCodeGenerator:
    """Deterministic generator returning predefined codes, for tests."""

    def __init__(self, codes: Iterable[str]) -> None:
        self._codes = deque(codes)

    def generate(self) -> str:
        if not self._codes:
            raise RuntimeError("SequenceCodeGenerator exhausted.")
        return self._codes.popleft()
