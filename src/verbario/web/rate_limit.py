"""Fixed-window rate limiting per client address."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

logger = structlog.get_logger(__name__)


@dataclass
class WindowDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_seconds: int


class FixedWindowLimiter:
    """Allow max_requests per client in each window_seconds window."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, client: str) -> WindowDecision:
        """Count one request for client and decide whether it may proceed."""
        now = self._clock()
        with self._lock:
            started, count = self._windows.get(client, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            allowed = count < self.max_requests
            if allowed:
                count += 1
            self._windows[client] = (started, count)
            self._prune(now)

        return WindowDecision(
            allowed=allowed,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_seconds=max(0, math.ceil(started + self.window_seconds - now)),
        )

    def _prune(self, now: float) -> None:
        # Drop expired windows so idle clients do not accumulate
        if len(self._windows) < 1024:
            return
        expired = [
            c for c, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for client in expired:
            del self._windows[client]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Answer 429 once a client exceeds its budget; add x-ratelimit-* headers."""

    def __init__(self, app: ASGIApp, limiter: FixedWindowLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        client = request.client.host if request.client else "unknown"
        decision = self.limiter.hit(client)

        if decision.allowed:
            response = await call_next(request)
        else:
            logger.warning("rate_limit.exceeded", client=client, path=request.url.path)
            response = JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Too many requests, please try again later"},
            )

        response.headers["x-ratelimit-limit"] = str(decision.limit)
        response.headers["x-ratelimit-remaining"] = str(decision.remaining)
        response.headers["x-ratelimit-reset"] = str(decision.reset_seconds)
        return response
