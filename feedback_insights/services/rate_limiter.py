"""Sliding-window rate limiter for classification service calls."""

import logging
import time
from collections import deque
from collections.abc import Callable
from functools import lru_cache

from ..config import RATE_LIMIT_CONFIG, get_rate_limit

logger = logging.getLogger(__name__)


class RateLimiter:
    """Caps requests per rolling window.

    Callers share one instance on a single event loop. None of the methods
    await, so a check and its record can't interleave with another caller's.
    """

    def __init__(
        self,
        max_requests: int | None = None,
        window_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_requests: Requests allowed per window (defaults to the
                configured cap for the current environment)
            window_seconds: Window length (defaults to 60 seconds)
            clock: Time source returning seconds

        """
        self.max_requests = max_requests if max_requests is not None else get_rate_limit()
        self.window_seconds = (
            window_seconds
            if window_seconds is not None
            else float(RATE_LIMIT_CONFIG["window_seconds"])
        )
        self._clock = clock
        self._requests: deque[float] = deque()

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._requests and self._requests[0] <= cutoff:
            self._requests.popleft()

    def try_acquire(self) -> bool:
        """Return True if another request fits in the current window."""
        self._prune(self._clock())
        return len(self._requests) < self.max_requests

    def record(self) -> None:
        """Record a request made now."""
        self._requests.append(self._clock())

    def acquire(self) -> bool:
        """Check and record in one step.

        Returns:
            True if the request was admitted and recorded

        """
        now = self._clock()
        self._prune(now)
        if len(self._requests) >= self.max_requests:
            logger.debug(
                f"Rate limit reached: {len(self._requests)}/{self.max_requests} "
                f"requests in the last {self.window_seconds:.0f}s"
            )
            return False
        self._requests.append(now)
        return True

    def usage(self) -> dict[str, int]:
        """Get current usage of the window."""
        self._prune(self._clock())
        recent = len(self._requests)
        return {
            "requestsInLastMinute": recent,
            "remainingRequests": max(0, self.max_requests - recent),
        }

    def reset(self) -> None:
        """Forget all recorded requests."""
        self._requests.clear()


@lru_cache(maxsize=1)
def get_shared_rate_limiter() -> RateLimiter:
    """Get the process-wide limiter, creating it on first use."""
    limiter = RateLimiter()
    logger.info(
        f"Rate limiter configured for {limiter.max_requests} "
        f"requests per {limiter.window_seconds:.0f}s"
    )
    return limiter
