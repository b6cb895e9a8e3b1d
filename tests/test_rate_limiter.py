"""Tests for the client-side rate limiter."""

import pytest

from promptstitch.llm.errors import ClientRateLimitError
from promptstitch.llm.rate_limiter import RateLimiter


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_allows_up_to_max(self) -> None:
        """Test requests under the cap are recorded."""
        limiter = RateLimiter(max_requests=3, clock=FakeClock())

        for _ in range(3):
            limiter.check()

        assert limiter.request_count == 3

    def test_rejects_over_max(self) -> None:
        """Test the tenth request in a minute is rejected with the default cap."""
        limiter = RateLimiter(clock=FakeClock())

        for _ in range(9):
            limiter.check()

        with pytest.raises(ClientRateLimitError) as exc_info:
            limiter.check()

        assert exc_info.value.message == "Please wait a moment before making another request."

    def test_rejected_requests_are_not_recorded(self) -> None:
        """Test a rejection does not extend the window."""
        clock = FakeClock()
        limiter = RateLimiter(max_requests=1, clock=clock)
        limiter.check()

        clock.now += 30
        with pytest.raises(ClientRateLimitError):
            limiter.check()

        clock.now += 31
        limiter.check()
        assert limiter.request_count == 1

    def test_window_rolls(self) -> None:
        """Test old requests fall out of the window."""
        clock = FakeClock()
        limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)
        limiter.check()
        clock.now += 59
        limiter.check()

        clock.now += 2
        limiter.check()

        assert limiter.request_count == 2

    def test_reset(self) -> None:
        """Test reset forgets recorded requests."""
        limiter = RateLimiter(max_requests=1, clock=FakeClock())
        limiter.check()

        limiter.reset()
        limiter.check()

        assert limiter.request_count == 1
