"""Tests for emailed sign-in links."""

import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi import HTTPException

from src.muslimhunt.core.services import (
    InMemorySessionStorage,
    JwtGeneratorService,
    JwtVerificationService,
    MagicLinkService,
)
from src.muslimhunt.runtime.config.config_data import ConfigData, MagicLinkConfig
from src.muslimhunt.runtime.context import with_context


@pytest.fixture
def service():
    return MagicLinkService(InMemorySessionStorage())


class TestIssue:
    def test_link_carries_token(self, service):
        grant = service.issue("  Maryam@Example.com ", return_to="/submit")

        assert grant.email == "maryam@example.com"
        query = parse_qs(urlparse(grant.link).query)
        assert query["token"] == [grant.token]

    def test_token_claims(self, service):
        grant = service.issue("maryam@example.com", return_to="/forums")

        claims = JwtVerificationService().verify_magic_link(grant.token)

        assert claims.email == "maryam@example.com"
        assert claims.return_to == "/forums"
        assert claims.purpose == "magic_link"


class TestConsume:
    @pytest.mark.asyncio
    async def test_link_works_once(self, service):
        grant = service.issue("maryam@example.com")

        claims = await service.consume(grant.token)
        assert claims.email == "maryam@example.com"

        with pytest.raises(HTTPException) as exc_info:
            await service.consume(grant.token)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_rejects_tampered_token(self, service):
        grant = service.issue("maryam@example.com")

        with pytest.raises(HTTPException) as exc_info:
            await service.consume(grant.token[:-4] + "abcd")
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_rejects_tokens_for_other_purposes(self, service):
        token = JwtGeneratorService().generate_jwt(subject="maryam@example.com")

        with pytest.raises(HTTPException) as exc_info:
            await service.consume(token)
        assert exc_info.value.detail == "Token is not a sign-in link"

    @pytest.mark.asyncio
    async def test_rejects_expired_token(self, service):
        token = JwtGeneratorService().generate_jwt(
            subject="maryam@example.com",
            claims={"purpose": "magic_link"},
            expires_in_seconds=-3600,
        )

        with pytest.raises(HTTPException):
            await service.consume(token)


class TestSend:
    @pytest.mark.asyncio
    async def test_log_delivery_returns_grant(self, service):
        grant = await service.send("maryam@example.com")
        assert grant.email == "maryam@example.com"

    @pytest.mark.asyncio
    async def test_http_delivery_posts_email(self):
        sent = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return httpx.Response(202, json={"id": "msg-1"})

        service = MagicLinkService(
            InMemorySessionStorage(),
            http_client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        override = ConfigData(
            magic_link=MagicLinkConfig(
                delivery="http",
                email_api_url="https://mail.example.com/send",
                email_api_key="key-123",
            )
        )
        with with_context(override):
            grant = await service.send("maryam@example.com")

        assert len(sent) == 1
        assert sent[0].headers["Authorization"] == "Bearer key-123"
        body = json.loads(sent[0].content)
        assert body["to"] == ["maryam@example.com"]
        assert grant.link in body["text"]

    @pytest.mark.asyncio
    async def test_http_delivery_failure_is_swallowed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        service = MagicLinkService(
            InMemorySessionStorage(),
            http_client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        override = ConfigData(
            magic_link=MagicLinkConfig(delivery="http", email_api_url="https://mail.example.com/send")
        )
        with with_context(override):
            grant = await service.send("maryam@example.com")

        assert grant.email == "maryam@example.com"
