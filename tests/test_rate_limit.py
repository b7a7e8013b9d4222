"""
Tests for the token bucket rate limiter.
"""

import pytest

from rackbeat_sync.shopify import AsyncRateLimiter


class FakeClock:
    """Clock that only moves when the limiter sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def limiter(rate, capacity=1):
    clock = FakeClock()
    return AsyncRateLimiter(rate, capacity=capacity, clock=clock, sleep=clock.sleep), clock


class TestAsyncRateLimiter:
    """Tests for AsyncRateLimiter."""

    @pytest.mark.asyncio
    async def test_burst_passes_without_waiting(self):
        bucket, clock = limiter(rate=2, capacity=3)

        for _ in range(3):
            assert await bucket.acquire() == 0.0

        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_waits_for_refill_when_empty(self):
        bucket, clock = limiter(rate=2, capacity=1)

        await bucket.acquire()
        waited = await bucket.acquire()

        assert waited == pytest.approx(0.5)
        assert clock.now == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_sustained_rate(self):
        bucket, clock = limiter(rate=4, capacity=1)

        for _ in range(9):
            await bucket.acquire()

        # First request is free, the other eight take a quarter second each
        assert clock.now == pytest.approx(2.0)

    @pytest.mark.asyncio
    async def test_idle_time_refills_up_to_capacity(self):
        bucket, clock = limiter(rate=1, capacity=2)

        await bucket.acquire()
        await bucket.acquire()
        clock.now += 100

        assert await bucket.acquire() == 0.0
        assert await bucket.acquire() == 0.0
        assert await bucket.acquire() == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_zero_rate_disables_limiting(self):
        bucket, clock = limiter(rate=0)

        for _ in range(50):
            assert await bucket.acquire() == 0.0

        assert not bucket.enabled
        assert clock.sleeps == []

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            AsyncRateLimiter(rate=-1)
        with pytest.raises(ValueError):
            AsyncRateLimiter(rate=1, capacity=0)
