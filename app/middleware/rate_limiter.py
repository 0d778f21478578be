"""
Middleware for rate limiting requests.
"""
import time
import logging
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Dict, List, Callable, Optional

from config.config import settings

# Configure logging
logger = logging.getLogger(__name__)

# Paths the limiter never counts
EXEMPT_PATHS = ("/stripe/webhook", "/health")

class RateLimiter:
    """Sliding-window rate limiter keyed by client."""

    def __init__(self, limit: int, window: int, clock: Callable[[], float] = time.time):
        """
        Initialize the rate limiter.

        Args:
            limit: Maximum number of requests allowed in the window
            window: Time window in seconds
            clock: Time source, in seconds
        """
        self.limit = limit
        self.window = window
        self.clock = clock
        self.requests: Dict[str, List[float]] = {}
        self.last_sweep = clock()

    def is_rate_limited(self, key: str) -> bool:
        """
        Check if a key is rate limited, recording the request if it is not.

        Args:
            key: The key to check (usually an IP address)

        Returns:
            True if rate limited, False otherwise
        """
        current_time = self.clock()
        if current_time - self.last_sweep >= self.window:
            self.sweep()

        # Remove requests outside the window
        recent = [t for t in self.requests.get(key, []) if current_time - t < self.window]
        self.requests[key] = recent

        if len(recent) >= self.limit:
            return True

        recent.append(current_time)
        return False

    def sweep(self) -> int:
        """Drop keys whose requests have all left the window. Returns how many were dropped."""
        current_time = self.clock()
        self.last_sweep = current_time
        stale = [
            key for key, times in self.requests.items()
            if not times or current_time - times[-1] >= self.window
        ]
        for key in stale:
            del self.requests[key]
        return len(stale)

    def get_remaining(self, key: str) -> int:
        """Number of requests the key may still make in the current window."""
        if key not in self.requests:
            return self.limit

        current_time = self.clock()
        valid_requests = [t for t in self.requests[key] if current_time - t < self.window]
        return max(0, self.limit - len(valid_requests))

class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware for rate limiting requests."""

    def __init__(self, app, limiter: Optional[RateLimiter] = None):
        super().__init__(app)
        self.limiter = limiter or RateLimiter(
            limit=settings.API_RATE_LIMIT,
            window=settings.API_RATE_LIMIT_WINDOW,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Rate limit requests based on client IP.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            The response
        """
        path = request.url.path
        if path.startswith(EXEMPT_PATHS):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        limiter = self.limiter

        if limiter.is_rate_limited(client_ip):
            logger.warning(f"Security event: rate_limit_exceeded | IP: {client_ip} | Path: {path}")
            return JSONResponse(
                content={"error": "Too many requests. Please try again later."},
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={
                    "Retry-After": str(limiter.window),
                    "X-RateLimit-Limit": str(limiter.limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(int(time.time() + limiter.window)),
                },
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(limiter.limit)
        response.headers["X-RateLimit-Remaining"] = str(limiter.get_remaining(client_ip))
        response.headers["X-RateLimit-Reset"] = str(int(time.time() + limiter.window))

        return response

def add_rate_limit_middleware(app: FastAPI) -> None:
    """
    Add rate limit middleware to the FastAPI application.

    Args:
        app: The FastAPI application
    """
    app.add_middleware(RateLimitMiddleware)
