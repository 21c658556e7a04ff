"""
Journeo Backend — Login Throttling Middleware
===============================================

What:  Per-IP sliding window limit on POST /auth/login.
Why:   Slows down password guessing; no other endpoint is throttled.
How:   Keeps the timestamps of each IP's recent login attempts in memory.

Algorithm: Sliding Window Log
    1. Each IP gets a list of attempt timestamps
    2. On each attempt, drop timestamps older than the window
    3. If the remaining count >= LOGIN_RATE_LIMIT_ATTEMPTS, answer 429
       with Retry-After = seconds until the oldest attempt leaves the window
    4. Otherwise record the attempt and let it through

Scope:
    State is per process. Behind several workers each one counts separately;
    a shared store (Redis INCR + TTL) would be needed for a global limit.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from journeo.config import settings
from journeo.exceptions import RateLimitExceededError, error_payload

logger = logging.getLogger(__name__)


class LoginRateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window limiter for login attempts.

    Configuration (read per request, from settings):
        login_rate_limit_attempts: max attempts per window
        login_rate_limit_window:   window length in seconds

    Errors raised inside middleware bypass the app's exception handlers,
    so the 429 is rendered here in the same body shape they produce.
    """

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._attempts: Dict[str, List[float]] = defaultdict(list)
        self.login_path = f"{settings.api_prefix}/auth/login"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "POST" or request.url.path != self.login_path:
            return await call_next(request)

        client_ip = (
            getattr(request.client, "host", "unknown")
            if request.client
            else "unknown"
        )

        window = settings.login_rate_limit_window
        limit = settings.login_rate_limit_attempts
        now = time.time()
        window_start = now - window

        recent = [ts for ts in self._attempts[client_ip] if ts > window_start]
        self._attempts[client_ip] = recent

        if len(recent) >= limit:
            retry_after = int(recent[0] + window - now) + 1
            logger.warning(
                "Login rate limit exceeded for IP %s: %d attempts in %ds window",
                client_ip,
                len(recent),
                window,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content=error_payload(exc.status_code, exc.error, exc.message, request.url.path),
                headers={"Retry-After": str(retry_after)},
            )

        recent.append(now)

        if len(self._attempts) > 1000:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Drop IPs with no attempt inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._attempts.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in inactive_ips:
            del self._attempts[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
