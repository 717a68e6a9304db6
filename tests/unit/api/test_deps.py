"""Tests for origin and CSRF checks on state-changing requests."""

import pytest
from fastapi import HTTPException

from src.muslimhunt.api.http.deps import (
    SESSION_COOKIE,
    enforce_origin,
    is_origin_allowed,
    require_csrf,
)
from src.muslimhunt.core.security import generate_csrf_token
from src.muslimhunt.runtime.config.config_data import AppConfig, ConfigData
from src.muslimhunt.runtime.context import with_context


@pytest.fixture
def production():
    with with_context(ConfigData(app=AppConfig(environment="production"))):
        yield


def test_origin_allowlist_normalizes_default_ports():
    assert is_origin_allowed("http://localhost:3000")
    assert not is_origin_allowed("http://localhost:4000")


class TestEnforceOrigin:
    def test_relaxed_outside_production(self, request_factory):
        enforce_origin(request_factory({"origin": "https://evil.example.com"}, method="POST"))

    def test_reads_are_not_checked(self, request_factory, production):
        enforce_origin(request_factory({"origin": "https://evil.example.com"}, method="GET"))

    def test_allowed_origin(self, request_factory, production):
        enforce_origin(request_factory({"origin": "http://localhost:3000"}, method="POST"))

    @pytest.mark.parametrize(
        "headers",
        [
            {"origin": "https://evil.example.com"},
            {"origin": "null"},
            {},
            {"referer": "https://evil.example.com/page"},
        ],
    )
    def test_rejected(self, request_factory, production, headers):
        with pytest.raises(HTTPException) as exc_info:
            enforce_origin(request_factory(headers, method="POST"))
        assert exc_info.value.status_code == 403

    def test_referer_fallback(self, request_factory, production):
        enforce_origin(request_factory({"referer": "http://localhost:5173/submit"}, method="PUT"))


class TestRequireCsrf:
    def test_missing_header(self, request_factory, production):
        with pytest.raises(HTTPException) as exc_info:
            require_csrf(request_factory({"cookie": f"{SESSION_COOKIE}=s1"}, method="POST"))
        assert exc_info.value.status_code == 403

    def test_missing_session(self, request_factory, production):
        with pytest.raises(HTTPException) as exc_info:
            require_csrf(request_factory({"X-CSRF-Token": "1:abc"}, method="POST"))
        assert exc_info.value.status_code == 401

    def test_valid_token(self, request_factory, production):
        token = generate_csrf_token("s1")
        require_csrf(
            request_factory({"cookie": f"{SESSION_COOKIE}=s1", "X-CSRF-Token": token}, method="POST")
        )

    def test_token_for_other_session(self, request_factory, production):
        token = generate_csrf_token("s2")
        with pytest.raises(HTTPException):
            require_csrf(
                request_factory(
                    {"cookie": f"{SESSION_COOKIE}=s1", "X-CSRF-Token": token}, method="POST"
                )
            )
