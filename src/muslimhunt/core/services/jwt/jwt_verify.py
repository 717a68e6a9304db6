from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger

from src.muslimhunt.core.models.session import MagicLinkClaims
from src.muslimhunt.core.services.jwt.jwt_gen import signing_secret
from src.muslimhunt.runtime.context import get_config

MAGIC_LINK_PURPOSE = "magic_link"


class JwtVerificationService:
    def verify_jwt(self, token: str, *, key: str | None = None) -> dict:
        """Decoded claims of a token issued by this service; 401 on any failure."""
        jwt_config = get_config().jwt
        options = {
            "iss": {"essential": True, "value": jwt_config.gen_issuer},
            "aud": {"essential": True, "values": list(jwt_config.audiences)},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            claims = JsonWebToken(jwt_config.allowed_algorithms).decode(
                token, signing_secret(key), claims_options=options
            )
            claims.validate(leeway=jwt_config.clock_skew)
        except (JoseError, ValueError) as e:
            logger.debug("Rejected token: {}", e)
            raise HTTPException(status_code=401, detail=f"JWT error: {e}") from e
        return dict(claims)

    def verify_magic_link(self, token: str) -> MagicLinkClaims:
        payload = self.verify_jwt(token)
        if payload.get("purpose") != MAGIC_LINK_PURPOSE:
            raise HTTPException(status_code=401, detail="Token is not a sign-in link")
        if not payload.get("jti"):
            raise HTTPException(status_code=401, detail="Missing jti claim")
        return MagicLinkClaims.from_payload(payload)
