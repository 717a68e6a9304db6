"""Request-scoped dependencies: services, the signed-in member and write guards."""

from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache
from urllib.parse import urlsplit

from fastapi import Depends, HTTPException, Request
from loguru import logger
from sqlmodel import Session

from src.muslimhunt.api.http.app_data import ApplicationDependencies
from src.muslimhunt.api.http.middleware.limiter import rate_limit
from src.muslimhunt.core.security import validate_csrf_token
from src.muslimhunt.core.services import (
    AuthSessionService,
    ChangeHub,
    FileStorageService,
    MagicLinkService,
    OAuthClientService,
    UserSessionService,
)
from src.muslimhunt.entities.core.profile import Profile, ProfileRepository
from src.muslimhunt.runtime.context import get_config

SESSION_COOKIE = "user_session_id"
WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _services(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    with _services(request).database_service.get_session() as session:
        yield session


def get_user_session_service(request: Request) -> UserSessionService:
    return _services(request).user_session_service


def get_auth_session_service(request: Request) -> AuthSessionService:
    return _services(request).auth_session_service


def get_oauth_client_service(request: Request) -> OAuthClientService:
    return _services(request).oauth_client_service


def get_magic_link_service(request: Request) -> MagicLinkService:
    return _services(request).magic_link_service


def get_file_storage_service(request: Request) -> FileStorageService:
    return _services(request).file_storage_service


def get_change_hub(request: Request) -> ChangeHub:
    return _services(request).change_hub


class _NotSignedIn(Exception):
    pass


async def _session_profile(request: Request, db: Session, sessions: UserSessionService) -> Profile:
    session_id = request.cookies.get(SESSION_COOKIE)
    if not session_id:
        raise _NotSignedIn("Session required")
    user_session = await sessions.get_user_session(session_id)
    if user_session is None:
        raise _NotSignedIn("Invalid or expired session")
    profile = ProfileRepository(db).get(user_session.user_id)
    if profile is None:
        logger.warning("Session {} refers to a deleted profile {}", session_id, user_session.user_id)
        raise _NotSignedIn("User not found")

    request.state.session_id = session_id
    request.state.user_session = user_session
    request.state.uid = profile.id
    return profile


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db_session),
    sessions: UserSessionService = Depends(get_user_session_service),
) -> Profile:
    try:
        return await _session_profile(request, db, sessions)
    except _NotSignedIn as e:
        raise HTTPException(status_code=401, detail=str(e)) from e


async def get_optional_user(
    request: Request,
    db: Session = Depends(get_db_session),
    sessions: UserSessionService = Depends(get_user_session_service),
) -> Profile | None:
    try:
        return await _session_profile(request, db, sessions)
    except _NotSignedIn:
        return None


def require_admin(user: Profile = Depends(get_current_user)) -> Profile:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


@lru_cache(maxsize=64)
def _origin_key(url: str) -> tuple[str, str, int]:
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    return scheme, (parts.hostname or "").lower(), parts.port or (443 if scheme == "https" else 80)


def is_origin_allowed(origin: str) -> bool:
    return _origin_key(origin) in {_origin_key(o) for o in get_config().app.cors.origins}


def _checks_apply(request: Request) -> bool:
    return request.method in WRITE_METHODS and get_config().app.environment == "production"


def enforce_origin(request: Request) -> None:
    """Writes must come from an allowed Origin, or failing that an allowed Referer."""
    if not _checks_apply(request):
        return
    origin = request.headers.get("origin")
    if origin == "null":
        raise HTTPException(status_code=403, detail="Origin 'null' not allowed")
    if origin:
        if not is_origin_allowed(origin):
            raise HTTPException(status_code=403, detail="Origin not allowed")
        return
    referer = request.headers.get("referer")
    if not referer or not is_origin_allowed(referer):
        raise HTTPException(status_code=403, detail="Missing or disallowed Origin")


def require_csrf(request: Request) -> None:
    """Writes must carry a CSRF token signed for the caller's session."""
    if not _checks_apply(request):
        return
    security = get_config().security
    token = request.headers.get(security.csrf_header_name)
    if not token:
        raise HTTPException(status_code=403, detail="Missing CSRF token header")
    session_id = request.cookies.get(SESSION_COOKIE)
    if not session_id:
        raise HTTPException(status_code=401, detail="No session found")
    if not validate_csrf_token(session_id, token, max_age_hours=security.csrf_token_max_age_hours):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")


# Every guarded write also counts against the default request quota.
protected_write = [Depends(rate_limit()), Depends(enforce_origin), Depends(require_csrf)]
