"""In-memory sliding window rate limiter for the auth endpoints, keyed by client address."""

import time
from collections import defaultdict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from src.config.settings import get_settings

# Credential endpoints are the brute-force target
LIMITED_PREFIX = "/auth/"
WINDOW_SECONDS = 60.0


class RateLimiterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        # client address -> list of request timestamps
        self._windows: dict[str, list[float]] = defaultdict(list)
        self._last_sweep = 0.0

    def _check_limit(self, window: list[float], limit: int, now: float) -> tuple[bool, int]:
        """Remove expired entries, check if under limit. Returns (allowed, retry_after_seconds)."""
        cutoff = now - WINDOW_SECONDS
        while window and window[0] < cutoff:
            window.pop(0)

        if len(window) >= limit:
            retry_after = int(window[0] - cutoff) + 1
            return False, retry_after

        window.append(now)
        return True, 0

    def _sweep(self, now: float) -> None:
        """Forget clients whose every request has left the window."""
        cutoff = now - WINDOW_SECONDS
        for client in [c for c, window in self._windows.items() if not window or window[-1] < cutoff]:
            del self._windows[client]
        self._last_sweep = now

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(LIMITED_PREFIX) or request.method != "POST":
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        settings = get_settings()

        now = time.time()
        if now - self._last_sweep >= WINDOW_SECONDS:
            self._sweep(now)

        allowed, retry_after = self._check_limit(self._windows[client], settings.RATE_LIMIT_AUTH, now)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={
                    "status": "error",
                    "error": {
                        "type": "rate_limit",
                        "message": "Too many authentication attempts",
                        "request_id": getattr(request.state, "request_id", "unknown"),
                    },
                },
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
