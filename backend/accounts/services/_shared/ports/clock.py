from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of the current, timezone-aware UTC time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock implementation."""

    def now(self) -> datetime:
        return datetime.now(tz=UTC)


class FrozenClock:
    """
    Manually driven clock used in unit tests.

    :param start: Initial instant (must be timezone-aware).
    :type start: datetime
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        if self._now.tzinfo is None:
            raise ValueError("FrozenClock requires a timezone-aware datetime.")

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward and return the new instant."""
        self._now = self._now + delta
        return self._now
