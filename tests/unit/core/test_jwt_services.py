"""Tests for token signing and verification."""

import pytest
from fastapi import HTTPException

from src.muslimhunt.core.services import JwtGeneratorService, JwtVerificationService


class TestJwtRoundTrip:
    def test_generated_token_verifies(self):
        token = JwtGeneratorService().generate_jwt(subject="user@example.com", claims={"role": "x"})

        claims = JwtVerificationService().verify_jwt(token)

        assert claims["sub"] == "user@example.com"
        assert claims["iss"] == "muslimhunt"
        assert claims["role"] == "x"
        assert claims["jti"]

    def test_reserved_claims_cannot_be_overridden(self):
        token = JwtGeneratorService().generate_jwt(subject="a@b.com", claims={"iss": "evil"})
        assert JwtVerificationService().verify_jwt(token)["iss"] == "muslimhunt"

    def test_wrong_secret_is_rejected(self):
        token = JwtGeneratorService().generate_jwt(subject="a@b.com", secret="another-secret")

        with pytest.raises(HTTPException) as exc_info:
            JwtVerificationService().verify_jwt(token)
        assert exc_info.value.status_code == 401

    def test_disallowed_algorithm(self):
        with pytest.raises(HTTPException) as exc_info:
            JwtGeneratorService().generate_jwt(subject="a@b.com", algorithm="HS512")
        assert exc_info.value.status_code == 500
