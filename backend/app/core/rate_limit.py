"""
Fixed-window request limiter keyed by client identity.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional
import logging
import math
import threading
import time
from app.core.config import settings
from app.core.errors import TooManyRequests

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimiter:
    """
    Allow at most ``max_requests`` per client within each window.

    Requests over the quota are rejected immediately with TooManyRequests;
    the limiter never waits. A client's counter starts over once its window
    has elapsed.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        message: str,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message
        self.name = name
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> int:
        """
        Count one request for ``key``.

        Returns:
            Requests remaining in the current window.

        Raises:
            TooManyRequests: If the quota for the window is exhausted.
        """
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                window = _Window(started_at=now)
                self._windows[key] = window
            window.count += 1
            count = window.count
            started_at = window.started_at

        if count > self.max_requests:
            retry_after = max(1, math.ceil(started_at + self.window_seconds - now))
            logger.warning(f"Rate limit '{self.name}' exceeded for client {key}")
            raise TooManyRequests(self.message, retry_after=retry_after)
        return self.max_requests - count

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock
        expired = [
            key for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    def reset(self, key: Optional[str] = None) -> None:
        """Clear one client's counter, or all of them."""
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)


auth_limiter = RateLimiter(
    max_requests=settings.AUTH_RATE_LIMIT,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    message="Too many login attempts, please try again later",
    name="auth",
)

api_limiter = RateLimiter(
    max_requests=settings.API_RATE_LIMIT,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    message="Too many requests, please try again later",
    name="api",
)
