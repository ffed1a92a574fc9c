"""
General Rate Limiting Middleware

Per-IP token bucket applied to every API endpoint.
"""
import logging
import time
from typing import Dict, Tuple
from threading import Lock
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class APIRateLimiter:
    """
    Token bucket rate limiter keyed by client IP.

    A limit of 0 disables limiting.
    """

    def __init__(self, requests_per_minute: int = 120, burst_size: int = 10):
        self.ip_buckets: Dict[str, Tuple[float, float]] = {}  # ip -> (tokens, last_refill)
        self.lock = Lock()
        self.rate_limit = requests_per_minute
        self.burst_size = burst_size

        if self.enabled:
            logger.info(f"Rate limiter initialized: {self.rate_limit} req/min per IP")

    @property
    def enabled(self) -> bool:
        return self.rate_limit > 0

    @property
    def capacity(self) -> int:
        return self.rate_limit + self.burst_size

    def _refill_bucket(self, tokens: float, last_refill: float, now: float) -> Tuple[float, float]:
        """Refill token bucket based on elapsed time."""
        elapsed = now - last_refill
        tokens = min(tokens + elapsed * (self.rate_limit / 60.0), self.capacity)
        return tokens, now

    def check_rate_limit(self, ip: str, now: float = None) -> Tuple[bool, str]:
        """
        Check if a request from this IP should be allowed.

        Returns:
            (allowed, reason) - True if allowed, False + reason if blocked
        """
        if not self.enabled:
            return True, ""

        now = time.time() if now is None else now
        with self.lock:
            tokens, last_refill = self.ip_buckets.get(ip, (self.capacity, now))
            tokens, last_refill = self._refill_bucket(tokens, last_refill, now)

            if tokens < 1:
                self.ip_buckets[ip] = (tokens, last_refill)
                logger.warning(f"Rate limit exceeded for IP: {ip}")
                return False, "Too many requests, please try again later"

            self.ip_buckets[ip] = (tokens - 1, last_refill)
            return True, ""

    def cleanup_old_entries(self, now: float = None):
        """Remove buckets inactive for 10 minutes."""
        now = time.time() if now is None else now
        with self.lock:
            self.ip_buckets = {
                ip: bucket for ip, bucket in self.ip_buckets.items()
                if now - bucket[1] < 600
            }


class GeneralRateLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware to apply rate limiting to all API endpoints.
    """

    # Exempt paths (health checks, docs)
    EXEMPT_PATHS = ["/api/health", "/docs", "/redoc", "/openapi.json"]

    def __init__(self, app, limiter: APIRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        if not self.limiter.enabled or any(request.url.path.startswith(path) for path in self.EXEMPT_PATHS):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        allowed, reason = self.limiter.check_rate_limit(client_ip)

        if not allowed:
            logger.warning(f"Rate limit blocked: {client_ip} - {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={"success": False, "error": reason},
                headers={
                    "Retry-After": "60",
                    "X-RateLimit-Limit": str(self.limiter.rate_limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        return await call_next(request)
