"""
Unit tests for the ``limits``-backed fixed-window rate counter.

The in-process storage covers the counting rules; the Redis storage runs
against fakeredis to check that windows live in Redis with a lifetime.
"""

from __future__ import annotations

from datetime import timedelta

import fakeredis
import pytest
from accounts.infra.ratelimit import LimitsRateCounter
from limits.storage import MemoryStorage

WINDOW = timedelta(seconds=60)


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


class TestMemoryBackedCounter:
    def test_allows_up_to_limit_then_blocks(self):
        counter = LimitsRateCounter.in_memory()

        decisions = [counter.hit("auth.sign_in:1.2.3.4", 3, WINDOW) for _ in range(4)]

        assert [d.allowed for d in decisions] == [True, True, True, False]
        assert [d.remaining for d in decisions] == [2, 1, 0, 0]
        assert 0 < decisions[-1].retry_after <= 60

    def test_keys_are_independent(self):
        counter = LimitsRateCounter.in_memory()

        counter.hit("a", 1, WINDOW)

        assert counter.hit("b", 1, WINDOW).allowed
        assert not counter.hit("a", 1, WINDOW).allowed

    def test_window_reset(self):
        storage = MemoryStorage()
        counter = LimitsRateCounter(storage)
        counter.hit("k", 1, WINDOW)
        assert not counter.hit("k", 1, WINDOW).allowed

        storage.reset()  # what expiry does at the end of the window

        assert counter.hit("k", 1, WINDOW).allowed

    def test_sub_second_window_is_rounded_up(self):
        counter = LimitsRateCounter.in_memory()

        decision = counter.hit("k", 1, timedelta(milliseconds=10))

        assert decision.allowed
        assert decision.retry_after == 1


class TestRedisBackedCounter:
    def test_windows_are_stored_in_redis_with_a_lifetime(self, fake_redis):
        counter = LimitsRateCounter.from_redis("redis://localhost:6379/0", fake_redis)

        first = counter.hit("auth.sign_in:1.2.3.4", 1, WINDOW)
        second = counter.hit("auth.sign_in:1.2.3.4", 1, WINDOW)

        assert first.allowed and not second.allowed
        keys = fake_redis.keys("*auth.sign_in:1.2.3.4*")
        assert len(keys) == 1
        assert 0 < fake_redis.ttl(keys[0]) <= 60
        assert 0 < second.retry_after <= 60
