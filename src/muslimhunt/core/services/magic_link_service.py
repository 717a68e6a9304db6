"""Passwordless sign-in by emailed link."""

from dataclasses import dataclass
from urllib.parse import urlencode

import httpx
from fastapi import HTTPException
from loguru import logger

from src.muslimhunt.core.models.session import MagicLinkClaims
from src.muslimhunt.core.services.jwt.jwt_gen import JwtGeneratorService
from src.muslimhunt.core.services.jwt.jwt_verify import (
    MAGIC_LINK_PURPOSE,
    JwtVerificationService,
)
from src.muslimhunt.core.storage.session_storage import SessionStorage
from src.muslimhunt.runtime.context import get_config


@dataclass(frozen=True)
class MagicLinkGrant:
    email: str
    token: str
    link: str
    expires_in: int


class MagicLinkService:
    def __init__(
        self,
        session_storage: SessionStorage,
        jwt_generator: JwtGeneratorService | None = None,
        jwt_verifier: JwtVerificationService | None = None,
        http_client_factory=None,
    ):
        self._storage = session_storage
        self._generator = jwt_generator or JwtGeneratorService()
        self._verifier = jwt_verifier or JwtVerificationService()
        self._http_client_factory = http_client_factory or (
            lambda: httpx.AsyncClient(timeout=10.0)
        )

    def issue(self, email: str, return_to: str = "/") -> MagicLinkGrant:
        cfg = get_config().magic_link
        email = email.strip().lower()
        token = self._generator.generate_jwt(
            subject=email,
            claims={"purpose": MAGIC_LINK_PURPOSE, "return_to": return_to},
            expires_in_seconds=cfg.token_ttl_seconds,
        )
        link = f"{cfg.verify_url}?{urlencode({'token': token})}"
        return MagicLinkGrant(email=email, token=token, link=link, expires_in=cfg.token_ttl_seconds)

    async def send(self, email: str, return_to: str = "/") -> MagicLinkGrant:
        """Issue a link and hand it to the configured delivery channel.

        Delivery failures are logged; the caller always gets the grant.
        """
        grant = self.issue(email, return_to)
        cfg = get_config().magic_link

        if cfg.delivery == "log":
            logger.info("Magic link for {}: {}", grant.email, grant.link)
            return grant

        if not cfg.email_api_url:
            logger.warning("Magic link delivery is 'http' but no email_api_url is set")
            return grant

        headers = {"Authorization": f"Bearer {cfg.email_api_key}"} if cfg.email_api_key else {}
        payload = {
            "from": cfg.sender,
            "to": [grant.email],
            "subject": "Your Muslim Hunt sign-in link",
            "text": f"Sign in to Muslim Hunt: {grant.link}\n\n"
            f"The link expires in {grant.expires_in // 60} minutes.",
        }
        try:
            async with self._http_client_factory() as client:
                response = await client.post(cfg.email_api_url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Magic link email to {} failed: {}", grant.email, e)
        return grant

    async def consume(self, token: str) -> MagicLinkClaims:
        """Verify ``token`` and burn its ``jti`` so the link works only once.

        Raises:
            HTTPException: 401 for an invalid, expired or reused link
        """
        claims = self._verifier.verify_magic_link(token)
        ttl = max(1, get_config().magic_link.token_ttl_seconds + get_config().jwt.clock_skew)
        first_use = await self._storage.set_if_absent(f"magic:{claims.jti}", claims, ttl)
        if not first_use:
            raise HTTPException(status_code=401, detail="This sign-in link was already used")
        return claims
