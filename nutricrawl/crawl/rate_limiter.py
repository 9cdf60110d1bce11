"""
Rate Limiter

Minimum-interval politeness limiter. One instance per source: fetches
within a source are spaced out, sources crawled in parallel do not wait
on each other.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class RateLimiter:
    """
    Blocks until min_interval seconds have passed since the previous wait().

    Usage:
        limiter = RateLimiter(1.5, category_interval=2.0)
        for ref in refs:
            limiter.wait()
            source.fetch_detail(ref)
        limiter.pause()
    """

    def __init__(
        self,
        min_interval: float,
        category_interval: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            min_interval: Seconds between consecutive fetches
            category_interval: Seconds to pause between categories
                (defaults to min_interval)
            sleep: Sleep function (injectable for tests)
            clock: Monotonic clock (injectable for tests)
        """
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = float(min_interval)
        self.category_interval = float(
            min_interval if category_interval is None else category_interval
        )
        self._sleep = sleep
        self._clock = clock
        self._lock = threading.Lock()
        self._last: Optional[float] = None

    def wait(self) -> float:
        """
        Block until the next fetch may start.

        Returns:
            Seconds slept (0.0 when no wait was needed)
        """
        with self._lock:
            slept = 0.0
            now = self._clock()
            if self._last is not None and self.min_interval > 0:
                remaining = self.min_interval - (now - self._last)
                if remaining > 0:
                    self._sleep(remaining)
                    slept = remaining
                    now = self._clock()
            self._last = now
            return slept

    def pause(self, seconds: Optional[float] = None) -> None:
        """Fixed delay between categories."""
        delay = self.category_interval if seconds is None else seconds
        if delay > 0:
            self._sleep(delay)

    def for_source(self) -> "RateLimiter":
        """Fresh limiter with the same intervals, for one source worker."""
        return RateLimiter(
            self.min_interval,
            category_interval=self.category_interval,
            sleep=self._sleep,
            clock=self._clock,
        )
