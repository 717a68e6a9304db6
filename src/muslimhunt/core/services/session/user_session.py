import secrets

from src.muslimhunt.core.models.session import UserSession
from src.muslimhunt.core.storage.session_storage import SessionStorage
from src.muslimhunt.runtime.context import get_config


def _key(session_id: str) -> str:
    return f"user:{session_id}"


class UserSessionService:
    """Signed-in sessions, refreshed on every read."""

    def __init__(self, session_storage: SessionStorage) -> None:
        self._storage = session_storage

    @staticmethod
    def _max_age() -> int:
        return get_config().app.session_max_age

    async def _save(self, user_session: UserSession) -> None:
        await self._storage.set(_key(user_session.id), user_session, self._max_age())

    async def create_user_session(self, user_id: str, provider: str, client_fingerprint: str) -> str:
        user_session = UserSession.open(
            secrets.token_urlsafe(32), user_id, provider, client_fingerprint, self._max_age()
        )
        await self._save(user_session)
        return user_session.id

    async def get_user_session(self, session_id: str) -> UserSession | None:
        stored = await self._storage.get(_key(session_id), UserSession)
        if stored is None:
            return None
        if stored.is_expired():
            await self.delete_user_session(session_id)
            return None

        user_session = stored.touch()
        await self._save(user_session)
        return user_session

    async def rotate_user_session(self, session_id: str) -> str:
        """Re-key a session after a privilege change.

        Raises:
            ValueError: If the session does not exist.
        """
        stored = await self._storage.get(_key(session_id), UserSession)
        if stored is None:
            raise ValueError("Session not found")

        rotated = stored.moved_to(secrets.token_urlsafe(32))
        await self._save(rotated)
        await self.delete_user_session(session_id)
        return rotated.id

    async def delete_user_session(self, session_id: str) -> None:
        await self._storage.delete(_key(session_id))
