"""
Rate limiting middleware for API protection.

Uses slowapi to limit requests per IP address, preventing:
- API abuse
- Excessive LLM API costs from summary requests
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import config


def get_rate_limit() -> str:
    """Default per-client limit from config."""
    return f"{max(config.RATE_LIMIT_PER_MINUTE, 1)}/minute"


# RATE_LIMIT_PER_MINUTE=0 disables limiting
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[get_rate_limit()],
    storage_uri="memory://",  # In-memory storage (resets on restart)
    enabled=config.RATE_LIMIT_PER_MINUTE > 0,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with a Retry-After hint."""
    retry_after = getattr(exc, "retry_after", 60)
    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded: {exc.detail}",
            "retry_after": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )


def setup_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter, its middleware and the 429 handler to an app."""
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
