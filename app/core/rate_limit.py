"""
Per-client sliding window rate limiting.

Three limiters share one window length: a general one applied to every request
by middleware, and two route-level ones (auth endpoints, create endpoints)
applied as FastAPI dependencies. State lives in process memory, so limits are
per worker.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.config import get_settings
from app.core import responses
from app.core.constants import ErrorMessages
from app.core.exceptions import RateLimitExceededException

logger = logging.getLogger(__name__)
settings = get_settings()


def client_key(request: Request) -> str:
    """
    Socket peer address. Forwarded headers are only honoured through
    ProxyHeadersMiddleware, for peers listed in FORWARDED_ALLOW_IPS.
    """
    return request.client.host if request.client else "unknown"


class SlidingWindowRateLimiter:
    """Keeps the request timestamps of each key inside the last `window_seconds`."""

    CLEANUP_EVERY = 1000

    def __init__(self, name: str, max_requests: int, window_seconds: int, message: str):
        self.name = name
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message
        self._hits: Dict[str, List[float]] = defaultdict(list)
        self._calls = 0

    def hit(self, key: str, now: float | None = None) -> Tuple[bool, int, int]:
        """
        Record one request for `key`.

        Returns (allowed, remaining, retry_after_seconds). A rejected request is
        not recorded.
        """
        now = time.time() if now is None else now
        window_start = now - self.window_seconds
        timestamps = [ts for ts in self._hits[key] if ts > window_start]
        self._hits[key] = timestamps

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window_seconds - now) + 1
            return False, 0, retry_after

        timestamps.append(now)
        self._calls += 1
        if self._calls % self.CLEANUP_EVERY == 0:
            self._cleanup(window_start)
        return True, self.max_requests - len(timestamps), 0

    def _cleanup(self, window_start: float) -> None:
        inactive = [k for k, ts in self._hits.items() if not ts or ts[-1] <= window_start]
        for key in inactive:
            del self._hits[key]
        if inactive:
            logger.debug("Rate limiter %s dropped %d idle clients", self.name, len(inactive))

    def reset(self) -> None:
        self._hits.clear()
        self._calls = 0

    def check(self, request: Request) -> None:
        key = client_key(request)
        allowed, _, retry_after = self.hit(key)
        if not allowed:
            logger.warning("Rate limit %s exceeded for %s", self.name, key)
            raise RateLimitExceededException(self.message, retry_after)

    async def __call__(self, request: Request) -> None:
        """FastAPI dependency form."""
        self.check(request)


general_limiter = SlidingWindowRateLimiter(
    "general",
    settings.RATE_LIMIT_MAX_REQUESTS,
    settings.RATE_LIMIT_WINDOW_SECONDS,
    ErrorMessages.RATE_LIMIT_EXCEEDED,
)
auth_limiter = SlidingWindowRateLimiter(
    "auth",
    settings.RATE_LIMIT_AUTH_MAX_REQUESTS,
    settings.RATE_LIMIT_WINDOW_SECONDS,
    ErrorMessages.AUTH_RATE_LIMIT_EXCEEDED,
)
create_limiter = SlidingWindowRateLimiter(
    "create",
    settings.RATE_LIMIT_CREATE_MAX_REQUESTS,
    settings.RATE_LIMIT_WINDOW_SECONDS,
    ErrorMessages.CREATE_RATE_LIMIT_EXCEEDED,
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Applies a limiter to every request outside the excluded paths."""

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, limiter: SlidingWindowRateLimiter = general_limiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        key = client_key(request)
        allowed, remaining, retry_after = self.limiter.hit(key)
        if not allowed:
            logger.warning("Rate limit %s exceeded for %s", self.limiter.name, key)
            return responses.error(
                429,
                self.limiter.message,
                headers={"Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers["RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["RateLimit-Remaining"] = str(remaining)
        return response
