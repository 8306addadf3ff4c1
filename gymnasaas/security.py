"""Security utilities: rate limiting, input sanitization."""

import math
import time
from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

DEFAULT_LIMIT = 100
DEFAULT_WINDOW_SECONDS = 60
# Seconds between sweeps of idle keys
SWEEP_INTERVAL_SECONDS = 60

# Longest matching prefix wins
ROUTE_LIMITS: dict[str, tuple[int, int]] = {
    "/api/super-admin": (50, 60),
    "/api/billing/checkout": (10, 60),
    "/api/admin/users": (20, 60),
    "/api/athletes": (100, 60),
}

# Never rate limited
EXEMPT_PREFIXES = ("/static", "/docs", "/openapi.json", "/health")


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    # Seconds until the oldest request in the window expires
    reset_in: int


def get_limit_for_route(pathname: str) -> tuple[str, int, int]:
    """Return ``(bucket, max_requests, window_seconds)`` for a path."""
    best: Optional[str] = None
    for prefix in ROUTE_LIMITS:
        if pathname.startswith(prefix) and (best is None or len(prefix) > len(best)):
            best = prefix
    if best is None:
        return pathname, DEFAULT_LIMIT, DEFAULT_WINDOW_SECONDS
    max_requests, window = ROUTE_LIMITS[best]
    return best, max_requests, window


def get_client_identifier(request: Request) -> str:
    """Identify the caller: user id header, then proxy headers, then peer address."""
    user_id = request.headers.get("x-user-id")
    if user_id:
        return f"user:{user_id}"
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


class RateLimiter:
    """In-memory sliding-window rate limiter.

    Tracks request timestamps per key within a time window. Each key may
    carry its own limit and window.
    """

    def __init__(self, max_requests: int = DEFAULT_LIMIT, window_seconds: int = DEFAULT_WINDOW_SECONDS):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._windows: dict[str, int] = {}
        self._last_sweep: Optional[float] = None
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._requests)

    def _cleanup(self, key: str, now: float, window: int) -> None:
        """Remove expired timestamps for a key, dropping the key once empty."""
        cutoff = now - window
        timestamps = [t for t in self._requests.get(key, ()) if t > cutoff]
        if timestamps:
            self._requests[key] = timestamps
        else:
            self._requests.pop(key, None)
            self._windows.pop(key, None)

    def _sweep(self, now: float) -> None:
        """Drop keys with no requests left in their window."""
        if self._last_sweep is not None and now - self._last_sweep < SWEEP_INTERVAL_SECONDS:
            return
        self._last_sweep = now
        for key in list(self._requests):
            self._cleanup(key, now, self._windows.get(key, self.window_seconds))

    def reset(self) -> None:
        """Clear all tracked requests. Used in tests to avoid cross-test pollution."""
        with self._lock:
            self._requests.clear()
            self._windows.clear()
            self._last_sweep = None

    def hit(
        self,
        key: str,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        now: Optional[float] = None,
    ) -> RateLimitResult:
        """Record a request for ``key`` unless it is over the limit."""
        limit = max_requests or self.max_requests
        window = window_seconds or self.window_seconds
        now = time.monotonic() if now is None else now

        with self._lock:
            self._sweep(now)
            self._cleanup(key, now, window)
            self._windows[key] = window
            timestamps = self._requests[key]
            if len(timestamps) >= limit:
                reset_in = math.ceil(timestamps[0] + window - now)
                return RateLimitResult(False, limit, 0, max(1, reset_in))
            timestamps.append(now)
            reset_in = math.ceil(timestamps[0] + window - now)
            return RateLimitResult(True, limit, limit - len(timestamps), max(0, reset_in))

    def check(self, request: Request) -> RateLimitResult:
        """Apply the route's limit to the request's caller."""
        bucket, max_requests, window = get_limit_for_route(request.url.path)
        key = f"{get_client_identifier(request)}:{bucket}"
        return self.hit(key, max_requests, window)


def _limit_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_in),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject callers over their route limit with HTTP 429."""

    def __init__(self, app, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path.startswith(EXEMPT_PREFIXES):
            return await call_next(request)

        result = self.limiter.check(request)
        if not result.allowed:
            headers = _limit_headers(result)
            headers["Retry-After"] = str(result.reset_in)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "RATE_LIMIT_EXCEEDED",
                    "message": "Demasiadas requests. Intenta de nuevo más tarde.",
                    "reset_in": result.reset_in,
                },
                headers=headers,
            )

        response = await call_next(request)
        for name, value in _limit_headers(result).items():
            response.headers[name] = value
        return response


api_limiter = RateLimiter()


def escape_like(value: str) -> str:
    """Escape SQL LIKE/ILIKE wildcard characters in user input.

    Uses backslash as the escape character.

    Args:
        value: Raw user input string.

    Returns:
        Escaped string safe for use in LIKE/ILIKE patterns.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
