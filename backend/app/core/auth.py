"""
Supabase JWT authentication.

JWTValidationMiddleware verifies bearer tokens against the project's JWKS
and stores the caller on request.state.user. Routes that need an
authenticated caller depend on require_auth_from_state.
"""

import asyncio
import logging
import time
from typing import Optional

import httpx
from fastapi import HTTPException, Request, status
from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class AuthUser(BaseModel):
    """Authenticated caller taken from the JWT."""

    auth_id: str  # Supabase auth.uid()
    email: str


class AuthOptionalUser(BaseModel):
    """Caller that may or may not be authenticated."""

    auth_id: Optional[str] = None
    email: Optional[str] = None
    is_authenticated: bool = False


class JWKSCache:
    """
    Time-limited cache of the Supabase JWKS document.

    A single asyncio.Lock serialises refetches so concurrent requests
    arriving on an expired cache trigger one HTTP call.
    """

    TTL: int = 3600  # seconds

    def __init__(self) -> None:
        self._keys: Optional[dict] = None
        self._fetched_at: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None  # created lazily inside the running loop

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def _is_fresh(self, now: float) -> bool:
        if self._keys is None or self._fetched_at is None:
            return False
        return now - self._fetched_at < self.TTL

    async def get_keys(self) -> dict:
        """Return cached keys, fetching them when missing or expired."""
        if self._is_fresh(time.time()):
            assert self._keys is not None
            return self._keys

        async with self._get_lock():
            if self._is_fresh(time.time()):
                assert self._keys is not None
                return self._keys

            self._keys = await self._fetch_keys()
            self._fetched_at = time.time()
            logger.info("JWKS cache refreshed")
            return self._keys

    async def _fetch_keys(self) -> dict:
        """Fetch JWKS from Supabase's well-known endpoint."""
        jwks_url = f"{get_settings().supabase_url}/auth/v1/.well-known/jwks.json"
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(jwks_url, timeout=10.0)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to fetch JWKS: {str(e)}",
            )

    def invalidate(self) -> None:
        """Drop cached keys so the next call refetches."""
        self._keys = None
        self._fetched_at = None


_jwks_cache = JWKSCache()


async def get_signing_key(token: str) -> dict:
    """Return the JWK whose kid matches the token header (first key if none match)."""
    jwks = await _jwks_cache.get_keys()

    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    kid = unverified_header.get("kid")
    keys = jwks.get("keys", [])

    for key in keys:
        if key.get("kid") == kid:
            return key

    if keys:
        return keys[0]

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No matching signing key found",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_auth_from_state(request: Request) -> AuthUser:
    """
    Require an authenticated caller on request.state (set by JWTValidationMiddleware).

    Raises 401, including the token error when the middleware recorded one.
    """
    user = getattr(request.state, "user", None)

    if user is None or not user.is_authenticated:
        token_error = getattr(request.state, "token_error", None)
        detail = "Authentication required"
        if token_error:
            detail = f"Authentication failed: {token_error}"

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthUser(auth_id=user.auth_id, email=user.email or "")
