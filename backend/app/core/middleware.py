"""
HTTP middleware.

- CorrelationIDMiddleware: request correlation IDs for log tracing
- JWTValidationMiddleware: verifies Supabase bearer tokens into request.state.user
- RequestLoggingMiddleware: one access-log line per request with timing
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.auth import AuthOptionalUser, get_signing_key

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("app.access")

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Get the current correlation ID from context."""
    return correlation_id_var.get()


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Reuse X-Request-ID / X-Correlation-ID from the caller, or generate one.

    The ID is exposed as request.state.correlation_id, through the
    ContextVar read by the logging filter, and echoed in the
    X-Request-ID response header.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = correlation_id
            return response
        finally:
            correlation_id_var.reset(token)


class JWTValidationMiddleware(BaseHTTPMiddleware):
    """
    Validate the bearer token (if any) and attach the caller to request.state.user.

    Requests without a valid token still go through as anonymous;
    protected routes reject them via require_auth_from_state.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.user = AuthOptionalUser(is_authenticated=False)
        request.state.token_error = None

        auth_header = request.headers.get("Authorization")

        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header[7:]

            try:
                claims = await self._validate_token(token)
                if claims:
                    request.state.user = AuthOptionalUser(
                        auth_id=claims.get("sub"),
                        email=claims.get("email"),
                        is_authenticated=True,
                    )
            except JWTError as e:
                request.state.token_error = str(e)
            except Exception as e:
                request.state.token_error = f"Auth error: {str(e)}"

        return await call_next(request)

    async def _validate_token(self, token: str) -> Optional[dict]:
        """Decode and verify the token; None if it has expired."""
        signing_key = await get_signing_key(token)

        payload = jwt.decode(
            token, signing_key, algorithms=["RS256", "ES256"], audience="authenticated"
        )

        exp = payload.get("exp")
        if exp and time.time() > exp:
            return None

        return payload


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = round((time.perf_counter() - started) * 1000, 1)
            access_logger.error(
                "%s %s ERROR - %sms",
                request.method,
                request.url.path,
                duration_ms,
                extra={"method": request.method, "path": request.url.path},
            )
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        user = getattr(request.state, "user", None)
        auth_id = user.auth_id if user is not None and user.is_authenticated else "anonymous"
        access_logger.info(
            "%s %s %s - %sms - %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            auth_id,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
