"""Client-side request rate limiting."""

from __future__ import annotations

import logging
import time
from typing import Callable

from promptstitch.llm.errors import ClientRateLimitError

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS_PER_MINUTE = 9


class RateLimiter:
    """Rolling-window request counter.

    Keeps the timestamps of accepted requests. A request is rejected when
    the window already holds ``max_requests`` entries; rejected requests are
    not recorded.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS_PER_MINUTE,
        window_seconds: float = 60.0,
        clock: Callable[[], float] | None = None,
    ):
        """Initialize the limiter.

        Args:
            max_requests: Requests allowed per window.
            window_seconds: Window length in seconds.
            clock: Monotonic time source, injectable for tests.
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._request_times: list[float] = []

    @property
    def request_count(self) -> int:
        """Number of requests recorded in the current window."""
        self._prune(self._clock())
        return len(self._request_times)

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        self._request_times = [t for t in self._request_times if t > cutoff]

    def check(self) -> None:
        """Record a request or raise if the cap is reached.

        Raises:
            ClientRateLimitError: If the window is full.
        """
        now = self._clock()
        self._prune(now)

        if len(self._request_times) >= self.max_requests:
            logger.warning(
                "Client rate limit reached (%d requests in %.0fs)",
                len(self._request_times),
                self.window_seconds,
            )
            raise ClientRateLimitError()

        self._request_times.append(now)

    def reset(self) -> None:
        """Forget all recorded requests."""
        self._request_times = []
