"""What the session store keeps: browser sessions, OAuth hand-offs and burned links."""

from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class _Expiring(BaseModel):
    created_at: datetime = Field(default_factory=_utcnow)
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or _utcnow()) >= self.expires_at


class UserSession(_Expiring):
    """A signed-in browser, found through the ``user_session_id`` cookie."""

    id: str
    user_id: str = Field(description="Profile id of the member")
    provider: str = Field(description="email, google, ...")
    client_fingerprint: str
    last_seen_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def open(
        cls, session_id: str, user_id: str, provider: str, client_fingerprint: str, max_age: int
    ) -> "UserSession":
        now = _utcnow()
        return cls(
            id=session_id,
            user_id=user_id,
            provider=provider,
            client_fingerprint=client_fingerprint,
            created_at=now,
            last_seen_at=now,
            expires_at=now + timedelta(seconds=max_age),
        )

    def touch(self) -> "UserSession":
        return self.model_copy(update={"last_seen_at": _utcnow()})

    def moved_to(self, session_id: str) -> "UserSession":
        return self.model_copy(update={"id": session_id, "last_seen_at": _utcnow()})


class AuthSession(_Expiring):
    """PKCE verifier and state held between the provider redirect and the callback."""

    id: str
    provider: str
    pkce_verifier: str
    state: str
    return_to: str = "/"
    client_fingerprint_hash: str
    used: bool = False

    @classmethod
    def start(cls, session_id: str, ttl_seconds: int, **fields: Any) -> "AuthSession":
        now = _utcnow()
        return cls(
            id=session_id, created_at=now, expires_at=now + timedelta(seconds=ttl_seconds), **fields
        )

    def matches(self, state: str, client_fingerprint_hash: str) -> bool:
        return state == self.state and client_fingerprint_hash == self.client_fingerprint_hash


class MagicLinkClaims(BaseModel):
    """Verified contents of an emailed sign-in link."""

    email: str
    jti: str
    purpose: str
    return_to: str = "/"
    expires_at: int = Field(description="``exp`` claim, seconds since the epoch")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "MagicLinkClaims":
        return cls(
            email=str(payload["sub"]).lower(),
            jti=payload["jti"],
            purpose=payload["purpose"],
            return_to=payload.get("return_to") or "/",
            expires_at=payload["exp"],
        )
