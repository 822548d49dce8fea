"""
Roster Backend — Rate Limiting Middleware
===========================================

What:  Optional per-IP sliding window rate limiter (RATE_LIMIT_ENABLED).
How:   Keeps a deque of request timestamps per client IP; expired entries are
       popped from the left on every request, and once the remaining count
       reaches the limit the request is rejected with 429.
When:  First in the middleware chain, so rejected requests do no other work.

Never limited: /health, the API docs, and everything under /__test__/ so a
black-box suite can always reset the roster.

This is process-local; several workers would each keep their own counters.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from app.config import settings

logger = logging.getLogger(__name__)

EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}
EXCLUDED_PREFIXES = ("/__test__/",)


def is_exempt(path: str) -> bool:
    return path in EXCLUDED_PATHS or path.startswith(EXCLUDED_PREFIXES)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Configuration (constructor arguments, falling back to settings):
        max_requests:    requests allowed per window (rate_limit_requests)
        window_seconds:  window length in seconds (rate_limit_window)
        enabled:         when false every request passes (rate_limit_enabled)
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests if max_requests is not None else settings.rate_limit_requests
        self.window_seconds = (
            window_seconds if window_seconds is not None else settings.rate_limit_window
        )
        self.enabled = enabled if enabled is not None else settings.rate_limit_enabled
        self._windows: Dict[str, Deque[float]] = defaultdict(deque)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.enabled or is_exempt(request.url.path):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        retry_after = self.hit(client_ip, time.time())
        if retry_after is not None:
            return self._too_many_requests(client_ip, retry_after)
        return await call_next(request)

    def hit(self, client_ip: str, now: float) -> Optional[int]:
        """
        Record a request from `client_ip` at `now`.

        Returns None when the request is allowed, otherwise the number of
        seconds until the oldest request in the window expires.
        """
        window = self._windows[client_ip]
        while window and window[0] <= now - self.window_seconds:
            window.popleft()

        if len(window) >= self.max_requests:
            return int(window[0] + self.window_seconds - now) + 1

        window.append(now)
        if len(self._windows) > 1000:
            self._forget_idle(now)
        return None

    def _forget_idle(self, now: float) -> None:
        idle = [
            ip for ip, window in self._windows.items()
            if not window or window[-1] <= now - self.window_seconds
        ]
        for ip in idle:
            del self._windows[ip]
        logger.debug("Dropped %d idle rate limit windows", len(idle))

    def _too_many_requests(self, client_ip: str, retry_after: int) -> JSONResponse:
        logger.warning(
            "Rate limit exceeded for IP %s: %d requests in %ds window",
            client_ip,
            self.max_requests,
            self.window_seconds,
        )
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "message": f"Too many requests. Please wait {retry_after} seconds before retrying.",
                "details": {"retry_after": retry_after},
                "request_id": None,
            },
            headers={"Retry-After": str(retry_after)},
        )
