"""Signing for the tokens this service hands out."""

import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger

from src.muslimhunt.runtime.context import get_config

REGISTERED = frozenset({"iss", "sub", "aud", "exp", "iat", "nbf", "jti"})


def signing_secret(override: str | None = None) -> str:
    secret = override or get_config().app.session_signing_secret
    if not secret:
        raise HTTPException(status_code=500, detail="JWT signing secret not configured")
    return secret


class JwtGeneratorService:
    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int = 900,
        algorithm: str = "HS256",
        secret: str | None = None,
    ) -> str:
        """Sign ``claims`` for ``subject``.

        Issuer, audience, timestamps and a random ``jti`` are always set here;
        callers cannot override them through ``claims``.

        Raises:
            HTTPException: 500 when the secret is missing or ``algorithm`` is not allowed
        """
        jwt_config = get_config().jwt
        if algorithm not in jwt_config.allowed_algorithms:
            logger.warning("Refusing to sign with {}", algorithm)
            raise HTTPException(status_code=500, detail=f"Algorithm {algorithm} not allowed")

        issued = int(time.time())
        payload = {k: v for k, v in (claims or {}).items() if k not in REGISTERED}
        payload.update(
            iss=jwt_config.gen_issuer,
            sub=subject,
            aud=jwt_config.audiences[0] if jwt_config.audiences else "muslimhunt-web",
            iat=issued,
            nbf=issued,
            exp=issued + expires_in_seconds,
            jti=generate_token(16),
        )

        try:
            token = JsonWebToken([algorithm]).encode({"alg": algorithm}, payload, signing_secret(secret))
        except JoseError as e:
            raise HTTPException(status_code=500, detail=f"JWT encoding failed: {e}") from e
        return token.decode()
