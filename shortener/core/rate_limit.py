"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different endpoints, configured through settings
- IP-based limiting
- One limiter per process: the route decorators bind at import time, so the
  limit strings come from the environment settings; create_app() switches
  the limiter on or off from the settings it is given
- Exceeded limits are reported with the same error body as every other
  API error (type TOO_MANY_REQUESTS)
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shortener.core.exceptions import RateLimitedError
from shortener.core.setting import settings

# Uses IP address for rate limiting
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

RATE_LIMITS = {
    "shorten": settings.RATE_LIMIT_SHORTEN,    # /shorten and /lengthen
    "redirect": settings.RATE_LIMIT_REDIRECT,
    "visits": settings.RATE_LIMIT_VISITS,
}


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a slowapi RateLimitExceeded as an API error response."""
    error = RateLimitedError(
        "rate-limit-exceeded",
        f"Rate limit exceeded: {exc.detail}",
        action="Wait before retrying the request.",
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())
