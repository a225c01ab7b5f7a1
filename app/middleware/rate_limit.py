"""
Rate limiting middleware for TechQuiz
Per-client request budget across the whole API
"""

from fastapi import FastAPI, Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.core.config import settings
from app.core.exceptions import create_error_response


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Render slowapi refusals in the standard error envelope"""
    return create_error_response(
        request=request,
        status_code=429,
        error_code="RATE_LIMIT_ERROR",
        message="Too many requests. Please try again later.",
        details={"limit": str(exc.detail)},
    )


def add_rate_limiting(app: FastAPI) -> Limiter:
    """Add rate limiting to application"""

    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_PERIOD} seconds"],
        enabled=settings.RATE_LIMIT_ENABLED,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return limiter
