"""Token bucket rate limiter for outbound API requests."""

import asyncio
import time


class RateLimiter:
    """Token bucket rate limiter for API requests."""

    def __init__(self, rate_limit: int, time_window: float = 1.0):
        """
        Initialize rate limiter.

        Args:
            rate_limit: Maximum number of requests per time window (0 disables limiting)
            time_window: Time window in seconds (default 1.0 for per-second limiting)
        """
        self.rate_limit = rate_limit
        self.time_window = time_window
        self.tokens = float(rate_limit)
        self.last_refill = time.monotonic()
        # created on first use so the limiter can be built outside a running loop
        self._lock: asyncio.Lock | None = None

    @property
    def enabled(self) -> bool:
        return self.rate_limit > 0

    async def acquire(self):
        """Acquire a token, waiting if necessary."""
        if not self.enabled:
            return
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            now = time.monotonic()
            time_passed = now - self.last_refill
            self.tokens = min(
                self.rate_limit,
                self.tokens + time_passed * (self.rate_limit / self.time_window),
            )
            self.last_refill = now

            if self.tokens >= 1:
                self.tokens -= 1
                return

            wait_time = (1 - self.tokens) * (self.time_window / self.rate_limit)
            await asyncio.sleep(wait_time)
            self.tokens = 0
            self.last_refill = time.monotonic()
