"""Shared pytest fixtures for test suite."""

import os

# Settings are read at import time by app.core.rate_limit; provide test values first.
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

import base64  # noqa: E402
import time  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from cryptography.hazmat.backends import default_backend  # noqa: E402
from cryptography.hazmat.primitives import serialization  # noqa: E402
from cryptography.hazmat.primitives.asymmetric import rsa  # noqa: E402
from fastapi import Request  # noqa: E402
from jose import jwt  # noqa: E402

from app.models.user import PostRef, UserProfile, UserRole  # noqa: E402

# =============================================================================
# RSA / JWKS Fixtures (RS256 tokens shaped like Supabase's)
# =============================================================================


@pytest.fixture(scope="session")
def rsa_key_pair():
    """RSA key pair for signing test JWTs (session-scoped, generation is slow)."""
    private_key = rsa.generate_private_key(
        public_exponent=65537, key_size=2048, backend=default_backend()
    )
    return private_key, private_key.public_key()


@pytest.fixture(scope="session")
def rsa_private_key_pem(rsa_key_pair):
    private_key, _ = rsa_key_pair
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def jwks_key_id() -> str:
    return "test-key-id-001"


@pytest.fixture(scope="session")
def test_jwks(rsa_key_pair, jwks_key_id):
    """JWKS document for the test public key."""
    _, public_key = rsa_key_pair
    public_numbers = public_key.public_numbers()

    def int_to_base64url(value: int, length: int) -> str:
        value_bytes = value.to_bytes(length, byteorder="big")
        return base64.urlsafe_b64encode(value_bytes).rstrip(b"=").decode("ascii")

    return {
        "keys": [
            {
                "kty": "RSA",
                "use": "sig",
                "alg": "RS256",
                "kid": jwks_key_id,
                "n": int_to_base64url(public_numbers.n, 256),
                "e": int_to_base64url(public_numbers.e, 3),
            }
        ]
    }


@pytest.fixture
def valid_jwt_claims():
    """Standard claims for an authenticated Supabase user."""
    return {
        "sub": "auth-user-uuid-12345",
        "email": "reporter@example.com",
        "aud": "authenticated",
        "role": "authenticated",
        "iat": int(time.time()),
        "exp": int(time.time()) + 3600,
    }


@pytest.fixture
def valid_jwt_token(valid_jwt_claims, rsa_private_key_pem, jwks_key_id):
    return jwt.encode(
        valid_jwt_claims, rsa_private_key_pem, algorithm="RS256", headers={"kid": jwks_key_id}
    )


@pytest.fixture(autouse=True)
def reset_jwks_cache():
    """Reset JWKS cache before each test to ensure isolation."""
    import app.core.auth as auth_module

    auth_module._jwks_cache.invalidate()
    yield
    auth_module._jwks_cache.invalidate()


# =============================================================================
# Mock Request Fixtures
# =============================================================================


@pytest.fixture
def mock_request():
    """Create a mock FastAPI Request object."""
    request = MagicMock(spec=Request)
    request.state = MagicMock()
    request.headers = {}
    return request


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def reporter_profile() -> UserProfile:
    return UserProfile(id="user-r1", auth_id="auth-r1", email="r1@example.com", username="r1")


@pytest.fixture
def admin_profile() -> UserProfile:
    return UserProfile(
        id="user-admin",
        auth_id="auth-admin",
        email="admin@example.com",
        username="admin",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def post_by_r2() -> PostRef:
    """Post P authored by user R2."""
    return PostRef(id="post-p", author_id="user-r2", title="My portfolio", status="PUBLISHED")


def make_report_row(**overrides) -> dict:
    """A reports row as returned by PostgREST, with embedded post."""
    row = {
        "id": "report-1",
        "reporter_id": "user-r1",
        "post_id": "post-p",
        "type": "SPAM",
        "reason": "Spam links!!",
        "status": "PENDING",
        "admin_note": None,
        "reviewed_at": None,
        "created_at": "2026-10-01T12:00:00+00:00",
        "post": {"id": "post-p", "title": "My portfolio", "status": "PUBLISHED"},
    }
    row.update(overrides)
    return row


@pytest.fixture
def report_row_factory():
    return make_report_row
