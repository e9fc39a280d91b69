"""
HTTP middleware: fixed-window rate limiting and access logging.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of counting one request against the limiter."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: float


class FixedWindowRateLimiter:
    """
    Counts requests per client key in fixed windows.

    All counters are cleared together when the current window elapses.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._window_start = clock()
        self._hits: dict[str, int] = {}

    def hit(self, key: str) -> RateLimitDecision:
        """Record one request for ``key`` and decide whether it may proceed."""
        now = self._clock()
        if now - self._window_start >= self.window_seconds:
            self._window_start = now
            self._hits.clear()

        count = self._hits.get(key, 0) + 1
        self._hits[key] = count

        return RateLimitDecision(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(self.max_requests - count, 0),
            reset_after=self.window_seconds - (now - self._window_start),
        )

    def reset(self) -> None:
        self._window_start = self._clock()
        self._hits.clear()


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects clients that exceed the limiter with 429."""

    def __init__(self, app, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        decision = self.limiter.hit(client_key(request))
        reset_seconds = str(max(math.ceil(decision.reset_after), 0))
        headers = {
            "RateLimit-Limit": str(decision.limit),
            "RateLimit-Remaining": str(decision.remaining),
            "RateLimit-Reset": reset_seconds,
        }

        if not decision.allowed:
            logger.warning("Rate limit exceeded", client=client_key(request), path=request.url.path)
            return PlainTextResponse(
                RATE_LIMIT_MESSAGE, status_code=429, headers={**headers, "Retry-After": reset_seconds}
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs one line per request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        http_version = request.scope.get("http_version", "1.1")
        user_agent = request.headers.get("user-agent", "-")
        logger.info(
            f'{client_key(request)} "{request.method} {request.url.path} HTTP/{http_version}" '
            f'{response.status_code} - "{user_agent}" {duration_ms:.1f}ms'
        )
        return response
