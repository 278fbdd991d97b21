"""Sliding-window rate limiter."""

from __future__ import annotations

from gemini_web_search.config import RateLimitSettings
from gemini_web_search.services.rate_limit import RateLimiter


def test_rejects_once_window_is_full(clock):
    limiter = RateLimiter(max_requests=3, window_seconds=60, clock=clock)

    assert [limiter.check() for _ in range(3)] == [True, True, True]
    assert limiter.check() is False


def test_admits_again_after_window_passes(clock):
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)
    limiter.check()
    limiter.check()
    assert limiter.check() is False

    clock.advance(60)

    assert limiter.check() is True


def test_rejections_are_not_recorded(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=10, clock=clock)
    assert limiter.check() is True

    for _ in range(5):
        clock.advance(1)
        assert limiter.check() is False

    clock.advance(5)
    assert limiter.check() is True
    assert limiter.pending() == 1


def test_window_slides_per_timestamp(clock):
    limiter = RateLimiter(max_requests=2, window_seconds=10, clock=clock)
    limiter.check()
    clock.advance(6)
    limiter.check()
    clock.advance(4)

    # First admission has aged out, second is still inside the window.
    assert limiter.check() is True
    assert limiter.check() is False


def test_from_settings_and_reset(clock):
    limiter = RateLimiter.from_settings(
        RateLimitSettings(max_requests=1, window_seconds=30), clock=clock
    )
    assert limiter.check() is True
    assert limiter.check() is False

    limiter.reset()

    assert limiter.check() is True
