"""Core services exports."""

from src.muslimhunt.core.storage.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
)

from .database.db_session import DbSessionService
from .file_storage import FileStorageService
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService
from .magic_link_service import MagicLinkService
from .oauth_client_service import OAuthClientService
from .realtime import ChangeHub
from .session.auth_session import AuthSessionService
from .session.user_session import UserSessionService

__all__ = [
    "JwtGeneratorService",
    "JwtVerificationService",
    "AuthSessionService",
    "UserSessionService",
    "MagicLinkService",
    "OAuthClientService",
    "FileStorageService",
    "ChangeHub",
    "InMemorySessionStorage",
    "RedisSessionStorage",
    "DbSessionService",
]
