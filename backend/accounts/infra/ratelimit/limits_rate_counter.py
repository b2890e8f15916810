# comments in English; reST docstrings
from __future__ import annotations

import math
import time
from datetime import timedelta

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, RedisStorage, Storage
from limits.strategies import FixedWindowRateLimiter

from accounts.services._shared.ports import RateCounter, RateDecision


class LimitsRateCounter(RateCounter):
    """
    Fixed-window counter backed by a :mod:`limits` storage.

    Production wires :class:`limits.storage.RedisStorage` so every worker
    shares the same windows; tests use :class:`limits.storage.MemoryStorage`.

    :param storage: ``limits`` storage holding the counters.
    :param namespace: First identifier of every key.
    """

    def __init__(self, storage: Storage, namespace: str = "accounts") -> None:
        self.storage = storage
        self.namespace = namespace
        self._limiter = FixedWindowRateLimiter(storage)

    @classmethod
    def in_memory(cls) -> LimitsRateCounter:
        return cls(MemoryStorage())

    @classmethod
    def from_redis(cls, url: str, client) -> LimitsRateCounter:
        """Share the connection pool of an existing ``redis.Redis`` client."""
        return cls(RedisStorage(url, connection_pool=client.connection_pool))

    def hit(self, key: str, limit: int, window: timedelta) -> RateDecision:
        item = RateLimitItemPerSecond(limit, max(1, int(window.total_seconds())))
        allowed = self._limiter.hit(item, self.namespace, key)
        reset_at, remaining = self._limiter.get_window_stats(item, self.namespace, key)
        return RateDecision(
            allowed=allowed,
            remaining=max(0, int(remaining)),
            retry_after=max(1, math.ceil(reset_at - time.time())),
        )
