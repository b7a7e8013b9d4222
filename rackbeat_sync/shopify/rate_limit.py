"""
Token bucket rate limiter for Shopify API calls.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class AsyncRateLimiter:
    """
    Token bucket limiter.
    
    Tokens refill continuously at `rate` per second up to `capacity`.
    Each request takes one token, waiting for the refill when the bucket
    is empty. A rate of zero disables limiting.
    """

    def __init__(
        self,
        rate: float,
        capacity: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize limiter.
        
        Args:
            rate: Tokens added per second
            capacity: Maximum tokens held (burst size)
            clock: Monotonic clock, injectable for tests
            sleep: Async sleep, injectable for tests
        """
        if rate < 0:
            raise ValueError("rate must be >= 0")
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(capacity)
        self._updated_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.rate > 0

    def _refill(self) -> None:
        now = self._clock()
        if self._updated_at is not None:
            elapsed = max(0.0, now - self._updated_at)
            self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
        self._updated_at = now

    async def acquire(self) -> float:
        """
        Take one token, waiting if necessary.
        
        Returns:
            Seconds spent waiting
        """
        if not self.enabled:
            return 0.0

        waited = 0.0
        async with self._lock:
            self._refill()
            while self._tokens < 1:
                delay = (1 - self._tokens) / self.rate
                logger.debug(f"Rate limit reached, waiting {delay:.2f}s")
                await self._sleep(delay)
                waited += delay
                self._refill()
            self._tokens -= 1
        return waited
