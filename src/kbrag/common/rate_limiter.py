"""Token-bucket throttle for outbound provider calls."""

from __future__ import annotations

import logging
import threading
import time

logger = logging.getLogger(__name__)


class RateLimiter:
    """Blocking token bucket refilled continuously at ``requests_per_minute``.

    One limiter is shared by every request that goes through an adapter, so
    concurrent chat requests stay within the provider quota together. A
    ``requests_per_minute`` of ``None`` or ``<= 0`` disables throttling.
    """

    def __init__(self, requests_per_minute: int | None, name: str = "provider") -> None:
        self.name = name
        self.requests_per_minute = (
            requests_per_minute if requests_per_minute and requests_per_minute > 0 else None
        )
        self.tokens = float(self.requests_per_minute or 0)
        self.updated_at = time.monotonic()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.requests_per_minute is not None

    @property
    def seconds_per_token(self) -> float:
        return 60.0 / self.requests_per_minute if self.requests_per_minute else 0.0

    def _take(self) -> float:
        """Take a token if one is available; otherwise return seconds until one is."""
        assert self.requests_per_minute is not None
        now = time.monotonic()
        elapsed = now - self.updated_at
        self.updated_at = now
        self.tokens = min(
            float(self.requests_per_minute), self.tokens + elapsed / self.seconds_per_token
        )
        if self.tokens >= 1.0:
            self.tokens -= 1.0
            return 0.0
        return (1.0 - self.tokens) * self.seconds_per_token

    def acquire(self) -> float:
        """Block until a call may be made. Returns the seconds spent waiting."""
        if not self.enabled:
            return 0.0

        waited = 0.0
        while True:
            with self._lock:
                delay = self._take()
            if delay <= 0.0:
                if waited:
                    logger.debug("%s rate limit: waited %.2fs for a slot", self.name, waited)
                return waited
            time.sleep(delay)
            waited += delay
