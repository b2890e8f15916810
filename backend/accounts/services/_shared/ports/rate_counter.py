from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RateDecision:
    """
    Result of counting one hit against a fixed window.

    :ivar allowed: ``True`` while the count is within the limit.
    :ivar remaining: Hits still allowed in the current window.
    :ivar retry_after: Seconds until the window resets.
    """

    allowed: bool
    remaining: int
    retry_after: int


class RateCounter(Protocol):
    """Time-windowed hit counter shared by every worker."""

    def hit(self, key: str, limit: int, window: timedelta) -> RateDecision: ...
