"""
Throttling and retry helpers for public APIs.

The Overpass public instance rejects clients that hammer it, so every request
goes through a token bucket, and transient failures are retried with
exponential backoff. Clock and sleep are injectable so tests never wait.
"""

import asyncio
import random
import time
from typing import Awaitable, Callable, Optional

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class TokenBucket:
    """Async token bucket.

    Holds at most ``capacity`` tokens and refills at ``refill_rate`` tokens per
    second. ``acquire`` waits until enough tokens are available.
    """

    def __init__(
        self,
        capacity: float = 1.0,
        refill_rate: float = 0.5,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        if capacity <= 0 or refill_rate <= 0:
            raise ValueError("capacity and refill_rate must be positive")
        self.capacity = capacity
        self.refill_rate = refill_rate
        self._clock = clock
        self._sleep = sleep
        self.tokens = capacity
        self.last_refill = clock()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self.last_refill)
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    async def acquire(self, tokens: float = 1.0) -> float:
        """Take ``tokens`` from the bucket, waiting if needed.

        Returns:
            Seconds spent waiting
        """
        if tokens > self.capacity:
            raise ValueError(f"Cannot acquire {tokens} tokens from a bucket of {self.capacity}")
        waited = 0.0
        async with self._lock:
            self._refill()
            if self.tokens < tokens:
                wait = (tokens - self.tokens) / self.refill_rate
                await self._sleep(wait)
                waited = wait
                self._refill()
                # The injected clock may not have advanced (tests); the wait was paid.
                self.tokens = max(self.tokens, tokens)
            self.tokens -= tokens
        return waited


class ExponentialBackoff:
    """Retry schedule: ``base * 2**attempt`` capped at ``maximum``, plus jitter.

    A server-provided ``Retry-After`` wins over the computed delay (still capped).
    """

    def __init__(
        self,
        max_retries: int = 3,
        base: float = 2.0,
        maximum: float = 60.0,
        jitter: float = 0.1,
        rng: Optional[random.Random] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must not be negative")
        self.max_retries = max_retries
        self.base = base
        self.maximum = maximum
        self.jitter = jitter
        self._rng = rng or random.Random()
        self._sleep = sleep

    def delay(self, attempt: int, retry_after: Optional[float] = None) -> float:
        """Delay before retry number ``attempt`` (0-based)."""
        if retry_after is not None:
            return min(self.maximum, retry_after)
        raw = min(self.maximum, self.base * (2 ** attempt))
        if self.jitter:
            raw += raw * self.jitter * self._rng.random()
        return min(self.maximum, raw)

    async def wait(self, attempt: int, retry_after: Optional[float] = None) -> float:
        delay = self.delay(attempt, retry_after)
        await self._sleep(delay)
        return delay
