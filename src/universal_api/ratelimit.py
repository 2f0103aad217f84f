"""Per-domain sliding-window rate limiting for URL submissions."""

import threading
import time
from collections import defaultdict, deque
from typing import Callable
from urllib.parse import urlparse


class DomainRateLimiter:
    """Allow at most ``max_requests`` per URL host within ``window_seconds``.

    Args:
        max_requests: Requests allowed per host inside one window.
        window_seconds: Length of the sliding window.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        max_requests: int = 1,
        window_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def allow(self, url: str) -> bool:
        """Record a request for ``url``'s host and say whether it is allowed.

        URLs that cannot be parsed are always allowed.
        """
        try:
            domain = urlparse(url).netloc
        except ValueError:
            return True

        with self._lock:
            now = self._clock()
            recent = self._requests[domain]
            cutoff = now - self.window_seconds
            while recent and recent[0] <= cutoff:
                recent.popleft()
            if len(recent) >= self.max_requests:
                return False
            recent.append(now)
            return True
