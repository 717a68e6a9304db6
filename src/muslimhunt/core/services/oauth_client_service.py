"""OAuth client for the authorization code flow with PKCE."""

import base64
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from src.muslimhunt.runtime.config.config_data import OAuthProviderConfig
from src.muslimhunt.runtime.context import get_config


class TokenResponse(BaseModel):
    """Token endpoint response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600
    refresh_token: str | None = None
    id_token: str | None = None

    @property
    def expires_at(self) -> int:
        return int(time.time()) + self.expires_in


class OAuthUserInfo(BaseModel):
    """Subset of the userinfo response used to provision a profile."""

    sub: str
    email: str | None = None
    # Providers that omit the claim are treated as unverified.
    email_verified: bool = False
    name: str | None = None
    full_name: str | None = None
    picture: str | None = None
    avatar_url: str | None = None


class OAuthClientService:
    def __init__(self, client_factory: Callable[[], httpx.AsyncClient] | None = None):
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=10.0))

    def _provider(self, provider: str) -> OAuthProviderConfig:
        providers = get_config().oauth.providers
        if provider not in providers:
            raise ValueError(f"Unknown OAuth provider: {provider}")
        return providers[provider]

    def _client_auth_headers(self, provider_config: OAuthProviderConfig) -> dict[str, str]:
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        if provider_config.client_secret:
            credentials = f"{provider_config.client_id}:{provider_config.client_secret}"
            encoded_credentials = base64.b64encode(credentials.encode()).decode()
            headers["Authorization"] = f"Basic {encoded_credentials}"
        return headers

    def build_authorization_url(
        self, provider: str, state: str, code_challenge: str
    ) -> str:
        provider_config = self._provider(provider)
        params = {
            "response_type": "code",
            "client_id": provider_config.client_id,
            "redirect_uri": provider_config.redirect_uri,
            "scope": " ".join(provider_config.scopes),
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        return f"{provider_config.authorization_endpoint}?{urlencode(params)}"

    async def exchange_code_for_tokens(
        self, code: str, pkce_verifier: str, provider: str
    ) -> TokenResponse:
        """Exchange the authorization code for tokens.

        Raises:
            httpx.HTTPStatusError: When the provider rejects the exchange
        """
        provider_config = self._provider(provider)
        token_data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": provider_config.redirect_uri,
            "client_id": provider_config.client_id,
            "code_verifier": pkce_verifier,
        }

        async with self._client_factory() as client:
            response = await client.post(
                provider_config.token_endpoint,
                data=token_data,
                headers=self._client_auth_headers(provider_config),
            )
            response.raise_for_status()
            return TokenResponse(**response.json())

    async def get_user_info(self, access_token: str, provider: str) -> OAuthUserInfo:
        provider_config = self._provider(provider)
        async with self._client_factory() as client:
            response = await client.get(
                provider_config.userinfo_endpoint,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            payload: dict[str, Any] = response.json()

        # some providers nest profile fields under user_metadata
        metadata = payload.get("user_metadata") or {}
        return OAuthUserInfo(**{**metadata, **payload})
