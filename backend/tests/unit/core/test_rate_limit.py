"""Tests for rate limiting configuration."""

import json
from unittest.mock import MagicMock

from fastapi import Request

from app.core.auth import AuthOptionalUser
from app.core.rate_limit import _get_rate_limit_key, rate_limit_exceeded_handler


def _request(user=None, host="192.168.1.1") -> MagicMock:
    request = MagicMock(spec=Request)
    request.state = MagicMock(spec=[]) if user is None else MagicMock(user=user)
    if host is None:
        request.client = None
    else:
        request.client.host = host
    return request


class TestGetRateLimitKey:
    def test_authenticated_reporter_keys_on_auth_id(self):
        user = AuthOptionalUser(auth_id="auth-r1", is_authenticated=True)
        assert _get_rate_limit_key(_request(user)) == "auth:auth-r1"

    def test_anonymous_state_falls_back_to_ip(self):
        user = AuthOptionalUser(is_authenticated=False)
        assert _get_rate_limit_key(_request(user, host="10.0.0.1")) == "ip:10.0.0.1"

    def test_no_user_state_returns_ip_key(self):
        assert _get_rate_limit_key(_request()) == "ip:192.168.1.1"

    def test_no_client_returns_unknown(self):
        assert _get_rate_limit_key(_request(host=None)) == "ip:unknown"


class TestRateLimitExceededHandler:
    def test_returns_429_with_code(self):
        response = rate_limit_exceeded_handler(MagicMock(spec=Request), MagicMock())

        assert response.status_code == 429
        body = json.loads(response.body)
        assert body["code"] == "RATE_LIMIT_EXCEEDED"
        assert "Rate limit exceeded" in body["detail"]
