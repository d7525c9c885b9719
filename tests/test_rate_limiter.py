"""Tests for the sliding-window rate limiter."""

import pytest

from feedback_insights.services.rate_limiter import RateLimiter


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(max_requests=3, window_seconds=60, clock=clock)


class TestRateLimiter:
    """Test suite for RateLimiter."""

    def test_initial_state(self, limiter):
        """A fresh limiter admits requests."""
        assert limiter.try_acquire() is True
        assert limiter.usage() == {"requestsInLastMinute": 0, "remainingRequests": 3}

    def test_try_acquire_does_not_record(self, limiter):
        """Checking alone never consumes a slot."""
        for _ in range(10):
            assert limiter.try_acquire() is True

    def test_cap_reached(self, limiter):
        """Once the cap is recorded, further checks fail."""
        for _ in range(3):
            limiter.record()

        assert limiter.try_acquire() is False
        assert limiter.usage()["remainingRequests"] == 0

    def test_window_slides(self, limiter, clock):
        """Requests older than the window stop counting."""
        limiter.record()
        clock.advance(30)
        limiter.record()
        limiter.record()
        assert limiter.try_acquire() is False

        clock.advance(30)  # first request is now exactly 60s old
        assert limiter.try_acquire() is True
        assert limiter.usage()["requestsInLastMinute"] == 2

        clock.advance(31)
        assert limiter.usage()["requestsInLastMinute"] == 0

    def test_acquire_checks_and_records(self, limiter):
        """acquire admits up to the cap and records each admission."""
        assert [limiter.acquire() for _ in range(4)] == [True, True, True, False]
        assert limiter.usage()["requestsInLastMinute"] == 3

    def test_reset(self, limiter):
        """reset clears the window."""
        for _ in range(3):
            limiter.acquire()
        limiter.reset()

        assert limiter.try_acquire() is True

    def test_default_cap_from_config(self, monkeypatch):
        """Without an explicit cap the environment decides."""
        monkeypatch.delenv("CLASSIFIER_RATE_LIMIT", raising=False)
        monkeypatch.setenv("APP_ENV", "production")

        assert RateLimiter().max_requests == 15

        monkeypatch.setenv("APP_ENV", "development")
        assert RateLimiter().max_requests == 60

    def test_cap_override(self, monkeypatch):
        """CLASSIFIER_RATE_LIMIT overrides the environment default."""
        monkeypatch.setenv("CLASSIFIER_RATE_LIMIT", "5")

        assert RateLimiter().max_requests == 5
