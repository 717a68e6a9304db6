import secrets

from src.muslimhunt.core.models.session import AuthSession
from src.muslimhunt.core.security import sanitize_return_url
from src.muslimhunt.core.storage.session_storage import SessionStorage
from src.muslimhunt.runtime.context import get_config


def _key(session_id: str) -> str:
    return f"auth:{session_id}"


class AuthSessionService:
    """State for one OAuth round trip. Each session is consumed by a single callback."""

    def __init__(self, session_storage: SessionStorage) -> None:
        self._storage = session_storage

    @staticmethod
    def _ttl() -> int:
        return get_config().security.auth_session_ttl_seconds

    async def create_auth_session(
        self,
        pkce_verifier: str,
        state: str,
        provider: str,
        return_to: str,
        client_fingerprint_hash: str,
    ) -> str:
        allowed_hosts = get_config().oauth.allowed_redirect_hosts
        auth_session = AuthSession.start(
            secrets.token_urlsafe(32),
            self._ttl(),
            provider=provider,
            pkce_verifier=pkce_verifier,
            state=state,
            return_to=sanitize_return_url(return_to, allowed_hosts=allowed_hosts),
            client_fingerprint_hash=client_fingerprint_hash,
        )
        await self._storage.set(_key(auth_session.id), auth_session, self._ttl())
        return auth_session.id

    async def get_auth_session(self, session_id: str) -> AuthSession | None:
        """The pending session, or None once it was used or timed out."""
        auth_session = await self._storage.get(_key(session_id), AuthSession)
        if auth_session is None:
            return None
        if auth_session.used or auth_session.is_expired():
            await self.delete_auth_session(session_id)
            return None
        return auth_session

    async def validate_auth_session(
        self, session_id: str, state: str | None, client_fingerprint_hash: str
    ) -> AuthSession | None:
        if not state:
            return None
        auth_session = await self.get_auth_session(session_id)
        if auth_session is None:
            return None
        # any mismatch forces the user to restart the flow
        if not auth_session.matches(state, client_fingerprint_hash):
            await self.delete_auth_session(session_id)
            return None
        return auth_session

    async def mark_auth_session_used(self, session_id: str) -> None:
        auth_session = await self._storage.get(_key(session_id), AuthSession)
        if auth_session is not None:
            spent = auth_session.model_copy(update={"used": True})
            await self._storage.set(_key(session_id), spent, self._ttl())

    async def delete_auth_session(self, session_id: str) -> None:
        await self._storage.delete(_key(session_id))
