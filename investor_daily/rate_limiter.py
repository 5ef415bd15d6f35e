"""
Fixed-interval rate limiting for outbound requests.
"""

import logging
import time
from typing import Callable


logger = logging.getLogger(__name__)


class FixedIntervalRateLimiter:
    """
    Enforces a minimum spacing between calls that pass through it.

    The first call goes through immediately. Clock and sleep are injectable
    so tests can run without real delays.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_interval < 0:
            raise ValueError(f"min_interval must not be negative, got: {min_interval}")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call = None

    def wait(self) -> None:
        """Block until at least min_interval has passed since the last call."""
        now = self._clock()
        if self._last_call is not None:
            elapsed = now - self._last_call
            if elapsed < self.min_interval:
                delay = self.min_interval - elapsed
                logger.debug(f"Rate limiting: sleeping {delay:.3f}s")
                self._sleep(delay)
                now = self._clock()
        self._last_call = now


class NoOpRateLimiter(FixedIntervalRateLimiter):
    """A limiter that never waits."""

    def __init__(self):
        super().__init__(0.0)

    def wait(self) -> None:
        return None
