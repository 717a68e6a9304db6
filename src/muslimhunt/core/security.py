"""Tokens, CSRF signatures, redirect checks and client fingerprints."""

import base64
import hashlib
import hmac
import secrets
import time
from urllib.parse import urlsplit

from fastapi import Request

from src.muslimhunt.runtime.context import get_config

FORWARDING_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def generate_secure_token(length: int = 32) -> str:
    return _b64url(secrets.token_bytes(length))


def generate_state() -> str:
    return generate_secure_token()


def generate_pkce_pair() -> tuple[str, str]:
    """Return ``(code_verifier, code_challenge)`` for the S256 method."""
    verifier = generate_secure_token()
    return verifier, _b64url(hashlib.sha256(verifier.encode("ascii")).digest())


def _current_hour() -> int:
    return int(time.time() // 3600)


def _csrf_digest(session_id: str, hour: int) -> str:
    secret = (get_config().app.csrf_signing_secret or "dev-secret").encode()
    return hmac.new(secret, f"{session_id}:{hour}".encode(), hashlib.sha256).hexdigest()


def generate_csrf_token(session_id: str, timestamp: int | None = None) -> str:
    """``{hour}:{hmac}`` where the HMAC covers the session id and the hour it was issued."""
    hour = _current_hour() if timestamp is None else timestamp
    return f"{hour}:{_csrf_digest(session_id, hour)}"


def validate_csrf_token(session_id: str, csrf_token: str | None, max_age_hours: int = 12) -> bool:
    hour_text, _, digest = (csrf_token or "").partition(":")
    if not hour_text.isdigit() or not digest:
        return False
    hour = int(hour_text)
    if _current_hour() - hour > max_age_hours:
        return False
    return hmac.compare_digest(_csrf_digest(session_id, hour), digest)


def sanitize_return_url(return_to: str | None, allowed_hosts: list[str] | None = None) -> str:
    """Where to send the browser after sign-in.

    Same-site paths pass through. Absolute URLs pass only when their host is in
    ``allowed_hosts``. Everything else, including protocol-relative URLs and
    values with control characters, becomes ``/``.
    """
    candidate = (return_to or "").strip()
    if not candidate or any(ord(ch) < 32 for ch in candidate):
        return "/"

    if candidate.startswith("/"):
        return "/" if candidate.startswith("//") else candidate

    parts = urlsplit(candidate)
    if parts.scheme in ("http", "https") and parts.hostname in (allowed_hosts or []):
        return candidate
    return "/"


def hash_client_fingerprint(user_agent: str | None, client_ip: str | None = None) -> str:
    components = [value.strip() for value in (user_agent, client_ip) if value]
    material = "|".join(components) or "unknown-client"
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def client_ip_from_request(request: Request) -> str | None:
    """First hop from the proxy headers, else the socket peer."""
    for header in FORWARDING_HEADERS:
        if value := request.headers.get(header):
            return value.split(",")[0].strip()
    return request.client.host if request.client else None


def extract_client_fingerprint(request: Request) -> str:
    return hash_client_fingerprint(request.headers.get("user-agent"), client_ip_from_request(request))
