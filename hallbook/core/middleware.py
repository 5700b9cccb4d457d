"""HTTP middleware and per-route rate limiting."""

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

import redis.asyncio as redis

from hallbook.config import settings
from hallbook.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60
UNLIMITED_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def client_address(request: Request) -> str:
    """Caller address, preferring proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (
        request.client.host if request.client else "unknown"
    )


class SlidingWindow:
    """Per-key request counter over the last minute, kept in a Redis sorted set."""

    def __init__(self, redis_url: str | None = None) -> None:
        self.redis_url = redis_url or settings.redis_url
        self._client: redis.Redis | None = None

    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(
                self.redis_url, encoding="utf-8", decode_responses=True
            )
        return self._client

    async def hit(self, key: str) -> int:
        """Record one request for ``key``.

        Returns:
            Number of requests already in the window before this one

        Raises:
            redis.RedisError: If Redis cannot be reached
        """
        now = time.time()
        async with self.client().pipeline(transaction=True) as pipe:
            await pipe.zremrangebyscore(key, 0, now - WINDOW_SECONDS)
            await pipe.zcard(key)
            await pipe.zadd(key, {uuid.uuid4().hex: now})
            await pipe.expire(key, WINDOW_SECONDS)
            results = await pipe.execute()
        return results[1]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Global per-IP limit; fails open when Redis is down."""

    def __init__(self, app, requests_per_minute: int = 100, redis_url: str | None = None):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.window = SlidingWindow(redis_url)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if settings.debug or request.url.path in UNLIMITED_PATHS:
            return await call_next(request)

        try:
            seen = await self.window.hit(f"rate_limit:{client_address(request)}")
        except redis.RedisError as e:
            logger.warning(f"Rate limiter unavailable: {e}")
            return await call_next(request)

        reset_at = str(int(time.time()) + WINDOW_SECONDS)
        if seen >= self.requests_per_minute:
            return JSONResponse(
                status_code=429,
                content={"detail": RateLimitExceeded().detail, "code": RateLimitExceeded.code},
                headers={
                    "Retry-After": str(WINDOW_SECONDS),
                    "X-RateLimit-Limit": str(self.requests_per_minute),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": reset_at,
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.requests_per_minute - seen - 1))
        response.headers["X-RateLimit-Reset"] = reset_at
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Stamps request id and timing headers; warns about slow requests."""

    slow_request_seconds = 1.0

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"

        summary = f"{request.method} {request.url.path} -> {response.status_code} in {elapsed:.3f}s"
        if elapsed > self.slow_request_seconds:
            logger.warning(f"Slow request {request_id}: {summary}")
        else:
            logger.debug(summary)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds standard browser hardening headers."""

    headers = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        if not settings.debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class RateLimiter:
    """Route dependency with its own, tighter budget (login, register, booking)."""

    def __init__(self, requests_per_minute: int = 10, key_prefix: str = "api"):
        self.requests_per_minute = requests_per_minute
        self.key_prefix = key_prefix
        self.window = SlidingWindow()

    async def __call__(self, request: Request) -> None:
        """Count the request against this route's budget.

        Raises:
            RateLimitExceeded: If the caller used up this route's budget
        """
        if settings.environment == "development":
            return

        try:
            seen = await self.window.hit(f"rate:{self.key_prefix}:{client_address(request)}")
        except redis.RedisError as e:
            logger.warning(f"Rate limiter '{self.key_prefix}' unavailable: {e}")
            return

        if seen >= self.requests_per_minute:
            raise RateLimitExceeded()


login_limiter = RateLimiter(requests_per_minute=5, key_prefix="login")
register_limiter = RateLimiter(requests_per_minute=3, key_prefix="register")
booking_limiter = RateLimiter(requests_per_minute=10, key_prefix="booking")
