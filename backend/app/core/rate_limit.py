"""
Rate limiting with slowapi.

Keys on the caller's auth_id when authenticated, client IP otherwise.
Counters live in the storage named by RATE_LIMIT_STORAGE_URI (Redis in
deployed environments).
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from app.core.config import get_settings


def _get_rate_limit_key(request: Request) -> str:
    user_state = getattr(request.state, "user", None)
    if user_state is not None and getattr(user_state, "auth_id", None):
        return f"auth:{user_state.auth_id}"

    client_ip = request.client.host if request.client else "unknown"
    return f"ip:{client_ip}"


limiter = Limiter(
    key_func=_get_rate_limit_key,
    default_limits=[get_settings().default_rate_limit],
    enabled=get_settings().rate_limit_enabled,
    storage_uri=get_settings().rate_limit_storage_uri,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return the standard error body for 429s."""
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "code": "RATE_LIMIT_EXCEEDED",
        },
    )
