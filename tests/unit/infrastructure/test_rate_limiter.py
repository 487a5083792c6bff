"""Unit tests for rate limiting infrastructure."""

from types import SimpleNamespace

import pytest
from fastapi import Request, Response

from src.app.api.http.middleware import limiter as limiter_module
from src.app.api.http.middleware.limiter import (
    DefaultLocalRateLimiter,
    configure_rate_limiter,
    rate_limit,
)
from src.app.core.errors import RateLimitExceededError
from src.app.runtime.config.config_data import ConfigData
from src.app.runtime.context import with_context


def make_request(path: str = "/api/v1/products", method: str = "GET", uid: str | None = None):
    request = Request(
        {
            "type": "http",
            "method": method,
            "path": path,
            "headers": [],
            "query_string": b"",
            "client": ("10.0.0.1", 5000),
        }
    )
    if uid is not None:
        request.state.uid = uid
    return request


class TestDefaultLocalRateLimiter:
    """Test the in-memory rate limiter implementation."""

    async def test_allows_requests_within_limit(self):
        """Should allow requests that don't exceed the rate limit."""
        limiter = DefaultLocalRateLimiter(2, 10_000, per_endpoint=True, per_method=True)
        request = make_request()

        await limiter(request, Response())
        await limiter(request, Response())

    async def test_blocks_requests_when_limit_exceeded(self):
        """Should raise a 429 error carrying a retry hint."""
        limiter = DefaultLocalRateLimiter(2, 5_000, per_endpoint=True, per_method=True)
        request = make_request()

        for _ in range(2):
            await limiter(request, Response())

        with pytest.raises(RateLimitExceededError) as exc_info:
            await limiter(request, Response())

        assert exc_info.value.status_code == 429
        assert 0 <= exc_info.value.details["retry_after"] <= 5

    async def test_rate_window_resets(self, monkeypatch):
        """Should allow requests again once the window has passed."""
        clock = [1000.0]
        monkeypatch.setattr(limiter_module, "time", SimpleNamespace(monotonic=lambda: clock[0]))
        limiter = DefaultLocalRateLimiter(1, 1_000, per_endpoint=True, per_method=True)
        request = make_request()

        await limiter(request, Response())
        with pytest.raises(RateLimitExceededError):
            await limiter(request, Response())

        clock[0] += 1.5
        await limiter(request, Response())

    async def test_users_have_separate_quotas(self):
        """Authenticated users are keyed by id, not by client address."""
        limiter = DefaultLocalRateLimiter(1, 10_000, per_endpoint=True, per_method=True)

        await limiter(make_request(uid="alice"), Response())
        await limiter(make_request(uid="bob"), Response())
        with pytest.raises(RateLimitExceededError):
            await limiter(make_request(uid="alice"), Response())

    async def test_per_endpoint_keys(self):
        """Different paths and methods get separate buckets."""
        limiter = DefaultLocalRateLimiter(1, 10_000, per_endpoint=True, per_method=True)

        await limiter(make_request("/api/v1/cart"), Response())
        await limiter(make_request("/api/v1/orders"), Response())
        await limiter(make_request("/api/v1/cart", method="POST"), Response())

    async def test_global_key(self):
        """Without per-endpoint keys every path shares one bucket."""
        limiter = DefaultLocalRateLimiter(1, 10_000, per_endpoint=False, per_method=False)

        await limiter(make_request("/api/v1/cart"), Response())
        with pytest.raises(RateLimitExceededError):
            await limiter(make_request("/api/v1/orders"), Response())

    async def test_cleanup_forgets_hits(self):
        limiter = DefaultLocalRateLimiter(1, 10_000, per_endpoint=True, per_method=True)
        request = make_request()
        await limiter(request, Response())

        await limiter.cleanup()

        await limiter(request, Response())


class TestRateLimitDependency:
    """Test the rate_limit dependency function."""

    @pytest.fixture(autouse=True)
    def fresh_limiters(self):
        configure_rate_limiter()
        yield
        configure_rate_limiter()

    async def test_disabled_limiter_is_noop(self):
        """Should never block while rate limiting is disabled."""
        override = ConfigData()
        override.rate_limiter.enabled = False
        guard = rate_limit(1, 60_000)

        with with_context(override):
            for _ in range(3):
                assert await guard(make_request(), Response()) is None

    async def test_enabled_limiter_blocks(self):
        """Should block once the configured quota is used."""
        override = ConfigData()
        override.rate_limiter.enabled = True
        guard = rate_limit(1, 60_000)

        with with_context(override):
            await guard(make_request("/api/v1/payments/cod"), Response())
            with pytest.raises(RateLimitExceededError):
                await guard(make_request("/api/v1/payments/cod"), Response())
