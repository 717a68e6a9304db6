from dataclasses import dataclass

from src.muslimhunt.core.services import (
    AuthSessionService,
    ChangeHub,
    DbSessionService,
    FileStorageService,
    JwtGeneratorService,
    JwtVerificationService,
    MagicLinkService,
    OAuthClientService,
    UserSessionService,
)
from src.muslimhunt.core.storage.session_storage import SessionStorage


@dataclass
class ApplicationDependencies:
    session_storage: SessionStorage
    jwt_verify_service: JwtVerificationService
    jwt_generation_service: JwtGeneratorService
    oauth_client_service: OAuthClientService
    magic_link_service: MagicLinkService
    user_session_service: UserSessionService
    auth_session_service: AuthSessionService
    database_service: DbSessionService
    file_storage_service: FileStorageService
    change_hub: ChangeHub
