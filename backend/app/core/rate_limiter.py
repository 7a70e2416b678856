"""
Rate Limiting for Panel Admin
=============================
Implements rate limiting using slowapi (in-memory by default, Redis when
RATE_LIMIT_STORAGE_URI points at one).

Special endpoints carry their own limits:
- /auth/login: 5 req/min (brute force protection)
- /backup/run: 3 req/min (each run dumps the whole database)
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging_config import logger


def get_user_identifier(request: Request) -> str:
    """
    Rate limit key.

    Priority:
    1. Authenticated user ID (set on request.state by the auth dependency)
    2. IP address
    """
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return a JSON 429 with a Retry-After hint"""
    retry_after = "60"

    logger.warning(
        f"[RateLimit] Exceeded for {get_user_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": {
                "code": "RATE_LIMITED",
                "message": "Too many requests. Please slow down.",
                "details": {"limit": str(exc.detail)},
            },
        },
        headers={"Retry-After": retry_after},
    )


def login_rate_limit():
    """5/min per client IP (no user is known yet)"""
    return limiter.limit("5/minute", key_func=get_user_identifier)


def backup_run_rate_limit():
    """3/min per user; each run dumps the whole database"""
    return limiter.limit("3/minute", key_func=get_user_identifier)
