"""Client-side token-bucket throttle for outbound requests."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable

from discogs.sdk.exceptions import RateLimitWaitCanceled

logger = logging.getLogger(__name__)


class TokenBucket:
    """Token accounting shared by both limiters. Not synchronized on its own.

    Starts full with *capacity* tokens and refills continuously at
    ``capacity / period`` tokens per second, never above *capacity*.
    """

    def __init__(
        self,
        capacity: int,
        period: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if period <= 0:
            raise ValueError(f"period must be > 0, got {period}")
        self.capacity = capacity
        self.period = period
        self._rate = capacity / period
        self._clock = clock
        self._tokens = float(capacity)
        self._updated = clock()

    @property
    def tokens(self) -> float:
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._updated
        if elapsed > 0:
            self._tokens = min(self.capacity, self._tokens + elapsed * self._rate)
        self._updated = now

    def try_take(self) -> float:
        """Take one token if available.

        Returns ``0.0`` on success, otherwise the number of seconds until the
        next token is due (nothing is taken in that case).
        """
        self._refill()
        if self._tokens >= 1:
            self._tokens -= 1
            return 0.0
        return (1 - self._tokens) / self._rate


class RateLimiter:
    """Thread-safe blocking limiter for :class:`~discogs.sdk.client.DiscogsClient`."""

    def __init__(
        self,
        capacity: int,
        period: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._bucket = TokenBucket(capacity, period, clock)
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._bucket.capacity

    def try_acquire(self) -> bool:
        with self._lock:
            return self._bucket.try_take() == 0.0

    def acquire(
        self,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> None:
        """Block until a token is taken.

        Raises :class:`RateLimitWaitCanceled` if *cancel* is set or *timeout*
        seconds pass first. A canceled wait never consumes a token.
        """
        deadline = None if timeout is None else self._clock() + timeout
        while True:
            if cancel is not None and cancel.is_set():
                raise RateLimitWaitCanceled("rate limit wait canceled")
            with self._lock:
                wait = self._bucket.try_take()
            if wait == 0.0:
                return
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise RateLimitWaitCanceled(
                        f"rate limit wait exceeded {timeout:.2f}s timeout"
                    )
                wait = min(wait, remaining)
            logger.debug("Rate limit reached, waiting %.2f seconds", wait)
            if cancel is None:
                time.sleep(wait)
            elif cancel.wait(wait):
                raise RateLimitWaitCanceled("rate limit wait canceled")


class AsyncRateLimiter:
    """Limiter for :class:`~discogs.sdk.client.AsyncDiscogsClient`.

    The bucket is only touched between awaits, so the event loop serializes
    every take without an explicit lock.
    """

    def __init__(
        self,
        capacity: int,
        period: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._bucket = TokenBucket(capacity, period, clock)
        self._clock = clock

    @property
    def capacity(self) -> int:
        return self._bucket.capacity

    def try_acquire(self) -> bool:
        return self._bucket.try_take() == 0.0

    async def acquire(
        self,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> None:
        """Suspend until a token is taken; see :meth:`RateLimiter.acquire`."""
        deadline = None if timeout is None else self._clock() + timeout
        while True:
            if cancel is not None and cancel.is_set():
                raise RateLimitWaitCanceled("rate limit wait canceled")
            wait = self._bucket.try_take()
            if wait == 0.0:
                return
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise RateLimitWaitCanceled(
                        f"rate limit wait exceeded {timeout:.2f}s timeout"
                    )
                wait = min(wait, remaining)
            logger.debug("Rate limit reached, waiting %.2f seconds", wait)
            if cancel is None:
                await asyncio.sleep(wait)
                continue
            try:
                await asyncio.wait_for(cancel.wait(), timeout=wait)
            except asyncio.TimeoutError:
                continue
            raise RateLimitWaitCanceled("rate limit wait canceled")
