"""
Unit tests for the per-IP token bucket rate limiter.
"""
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.api.rate_limiting import APIRateLimiter, GeneralRateLimitMiddleware


class TestAPIRateLimiter:

    def test_allows_up_to_capacity(self):
        limiter = APIRateLimiter(requests_per_minute=5, burst_size=2)
        results = [limiter.check_rate_limit("1.2.3.4", now=100.0)[0] for _ in range(8)]
        assert results == [True] * 7 + [False]

    def test_blocked_reason(self):
        limiter = APIRateLimiter(requests_per_minute=1, burst_size=0)
        limiter.check_rate_limit("1.2.3.4", now=0.0)
        allowed, reason = limiter.check_rate_limit("1.2.3.4", now=0.0)
        assert allowed is False
        assert reason == "Too many requests, please try again later"

    def test_refills_over_time(self):
        limiter = APIRateLimiter(requests_per_minute=60, burst_size=0)
        for _ in range(60):
            limiter.check_rate_limit("1.2.3.4", now=0.0)
        assert limiter.check_rate_limit("1.2.3.4", now=0.0)[0] is False
        # One token per second at 60/min
        assert limiter.check_rate_limit("1.2.3.4", now=1.0)[0] is True

    def test_ips_are_independent(self):
        limiter = APIRateLimiter(requests_per_minute=1, burst_size=0)
        assert limiter.check_rate_limit("1.1.1.1", now=0.0)[0] is True
        assert limiter.check_rate_limit("2.2.2.2", now=0.0)[0] is True
        assert limiter.check_rate_limit("1.1.1.1", now=0.0)[0] is False

    def test_zero_disables(self):
        limiter = APIRateLimiter(requests_per_minute=0)
        assert limiter.enabled is False
        assert all(limiter.check_rate_limit("1.2.3.4", now=0.0)[0] for _ in range(1000))

    def test_cleanup_old_entries(self):
        limiter = APIRateLimiter(requests_per_minute=10)
        limiter.check_rate_limit("old", now=0.0)
        limiter.check_rate_limit("new", now=900.0)
        limiter.cleanup_old_entries(now=1000.0)
        assert set(limiter.ip_buckets) == {"new"}


class TestGeneralRateLimitMiddleware:

    def _app(self, limiter):
        app = FastAPI()
        app.add_middleware(GeneralRateLimitMiddleware, limiter=limiter)

        @app.get("/api/users")
        def users():
            return {"success": True}

        @app.get("/api/health")
        def health():
            return {"status": "ok"}

        return TestClient(app)

    def test_returns_429_envelope(self):
        client = self._app(APIRateLimiter(requests_per_minute=1, burst_size=0))

        assert client.get("/api/users").status_code == 200
        response = client.get("/api/users")

        assert response.status_code == 429
        assert response.json() == {"success": False, "error": "Too many requests, please try again later"}
        assert response.headers["Retry-After"] == "60"
        assert response.headers["X-RateLimit-Limit"] == "1"

    def test_health_is_exempt(self):
        client = self._app(APIRateLimiter(requests_per_minute=1, burst_size=0))
        assert all(client.get("/api/health").status_code == 200 for _ in range(5))
