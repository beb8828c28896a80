"""Rate limiting middleware for SeedForge API."""

import time
from collections import defaultdict
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Simple in-memory rate limiter.

    Counts are per client and per process; they are not shared between workers.
    Clients are keyed by the socket address unless trust_forwarded_for is set,
    in which case the first x-forwarded-for hop is used. Only enable that
    behind a proxy that overwrites the header, otherwise it is client controlled.
    """

    # Prune stale client keys every 5 minutes
    _CLEANUP_INTERVAL = 300

    def __init__(self, app, requests_per_minute: int = 60, generate_requests_per_minute: int = 20,
                 trust_forwarded_for: bool = False):
        super().__init__(app)
        self.trust_forwarded_for = trust_forwarded_for
        self.requests_per_minute = requests_per_minute
        self.generate_requests_per_minute = generate_requests_per_minute
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._last_cleanup = time.time()

    def _get_client_id(self, request: Request) -> str:
        """Get a client identifier from the request."""
        forwarded = request.headers.get("x-forwarded-for") if self.trust_forwarded_for else None
        if forwarded:
            return forwarded.split(",")[0].strip()
        if request.client:
            return request.client.host
        return "unknown"

    def _is_generate_route(self, path: str) -> bool:
        """Check if this route runs the code generator."""
        return path.startswith("/api/generate-hardware")

    def _cleanup_stale_keys(self) -> None:
        """Remove client keys with no recent requests."""
        now = time.time()
        if now - self._last_cleanup < self._CLEANUP_INTERVAL:
            return
        self._last_cleanup = now
        window_start = now - 60
        stale_keys = [
            key for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for key in stale_keys:
            del self._requests[key]

    def _check_rate(self, client_id: str, limit: int) -> bool:
        """Check if client is within rate limit."""
        now = time.time()
        window_start = now - 60  # 1-minute window

        self._requests[client_id] = [
            t for t in self._requests[client_id] if t > window_start
        ]

        if len(self._requests[client_id]) >= limit:
            return False

        self._requests[client_id].append(now)
        return True

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip rate limiting for health checks
        if request.url.path == "/api/health":
            return await call_next(request)

        self._cleanup_stale_keys()

        client_id = self._get_client_id(request)

        if self._is_generate_route(request.url.path):
            if not self._check_rate(f"{client_id}:generate", self.generate_requests_per_minute):
                return JSONResponse(
                    status_code=429,
                    content={"detail": "Generation rate limit exceeded. Please wait before trying again."},
                )

        if not self._check_rate(client_id, self.requests_per_minute):
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Please wait before trying again."},
            )

        return await call_next(request)
