"""Sign-in endpoints: magic link, OAuth with PKCE, session state and logout."""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse
from loguru import logger
from pydantic import BaseModel, EmailStr
from sqlmodel import Session

from src.muslimhunt.api.http.deps import (
    SESSION_COOKIE,
    get_auth_session_service,
    get_change_hub,
    get_db_session,
    get_magic_link_service,
    get_oauth_client_service,
    get_optional_user,
    get_user_session_service,
    protected_write,
)
from src.muslimhunt.api.http.middleware.limiter import magic_link_rate_limit
from src.muslimhunt.core.security import (
    extract_client_fingerprint,
    generate_csrf_token,
    generate_pkce_pair,
    generate_state,
    sanitize_return_url,
)
from src.muslimhunt.core.services import (
    AuthSessionService,
    ChangeHub,
    MagicLinkService,
    OAuthClientService,
    UserSessionService,
)
from src.muslimhunt.core.services.profile_service import ProfileService, auth_user_from_profile
from src.muslimhunt.core.services.realtime import publish_auth_event
from src.muslimhunt.entities.core.profile import Profile
from src.muslimhunt.runtime.context import get_config

router = APIRouter(tags=["auth"])

MAGIC_LINK_SENT = "Check your email for the login link! Bismillah."
AUTH_SESSION_COOKIE = "auth_session_id"


class MagicLinkRequest(BaseModel):
    email: EmailStr
    return_to: str | None = None


class AuthState(BaseModel):
    authenticated: bool
    user: dict[str, Any] | None = None
    csrf_token: str | None = None


def _safe_target(return_to: str | None) -> str:
    return sanitize_return_url(return_to, allowed_hosts=get_config().oauth.allowed_redirect_hosts)


def _set_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    config = get_config()
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        httponly=True,
        secure=config.app.environment == "production" and config.security.secure_cookies,
        samesite=config.security.cookie_samesite,
        path="/",
    )


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


async def _sign_in(
    request: Request,
    profile: Profile,
    provider: str,
    target: str,
    sessions: UserSessionService,
    hub: ChangeHub,
) -> RedirectResponse:
    """Open a member session, announce it, and send the browser to ``target``."""
    session_id = await sessions.create_user_session(profile.id, provider, extract_client_fingerprint(request))
    publish_auth_event(hub, "SIGNED_IN", profile.id, asdict(auth_user_from_profile(profile)))

    response = _redirect(target)
    _set_cookie(response, SESSION_COOKIE, session_id, get_config().app.session_max_age)
    response.delete_cookie(AUTH_SESSION_COOKIE, path="/")
    return response


@router.post("/magic-link", status_code=status.HTTP_202_ACCEPTED, dependencies=[Depends(magic_link_rate_limit())])
async def request_magic_link(
    body: MagicLinkRequest,
    magic_links: MagicLinkService = Depends(get_magic_link_service),
) -> dict[str, str]:
    await magic_links.send(str(body.email), _safe_target(body.return_to))
    return {"message": MAGIC_LINK_SENT}


@router.get("/magic-link/verify")
async def verify_magic_link(
    request: Request,
    token: str,
    db: Session = Depends(get_db_session),
    magic_links: MagicLinkService = Depends(get_magic_link_service),
    sessions: UserSessionService = Depends(get_user_session_service),
    hub: ChangeHub = Depends(get_change_hub),
) -> RedirectResponse:
    """Exchange a link from the email for a session. Links work once."""
    claims = await magic_links.consume(token)
    profile = ProfileService(db).provision("email", claims.email, claims.email, email_verified=True)
    db.commit()
    logger.info("Profile {} signed in by email", profile.id)
    return await _sign_in(request, profile, "email", _safe_target(claims.return_to), sessions, hub)


@router.get("/oauth/{provider}/login")
async def initiate_oauth_login(
    request: Request,
    provider: str,
    return_to: str | None = None,
    auth_sessions: AuthSessionService = Depends(get_auth_session_service),
    oauth: OAuthClientService = Depends(get_oauth_client_service),
) -> RedirectResponse:
    if provider not in get_config().oauth.providers:
        raise HTTPException(status_code=400, detail=f"Unknown provider: {provider}")

    verifier, challenge = generate_pkce_pair()
    state = generate_state()
    auth_session_id = await auth_sessions.create_auth_session(
        pkce_verifier=verifier,
        state=state,
        provider=provider,
        return_to=_safe_target(return_to),
        client_fingerprint_hash=extract_client_fingerprint(request),
    )

    response = _redirect(oauth.build_authorization_url(provider, state, challenge))
    _set_cookie(response, AUTH_SESSION_COOKIE, auth_session_id, get_config().security.auth_session_ttl_seconds)
    return response


@router.get("/oauth/callback")
async def handle_oauth_callback(
    request: Request,
    state: str | None = None,
    code: str | None = None,
    error: str | None = None,
    db: Session = Depends(get_db_session),
    auth_sessions: AuthSessionService = Depends(get_auth_session_service),
    sessions: UserSessionService = Depends(get_user_session_service),
    oauth: OAuthClientService = Depends(get_oauth_client_service),
    hub: ChangeHub = Depends(get_change_hub),
) -> RedirectResponse:
    """Finish an OAuth sign-in. Cancelled or failed exchanges land on the home page."""
    auth_session_id = request.cookies.get(AUTH_SESSION_COOKIE)
    if not auth_session_id:
        raise HTTPException(status_code=400, detail="Missing auth session")
    flow = await auth_sessions.validate_auth_session(
        session_id=auth_session_id,
        state=state,
        client_fingerprint_hash=extract_client_fingerprint(request),
    )
    if flow is None:
        raise HTTPException(status_code=400, detail="Invalid or expired auth session")

    async def give_up() -> RedirectResponse:
        await auth_sessions.delete_auth_session(auth_session_id)
        response = _redirect("/")
        response.delete_cookie(AUTH_SESSION_COOKIE, path="/")
        return response

    if error or not code:
        logger.info("OAuth sign-in with {} abandoned: {}", flow.provider, error or "no code")
        return await give_up()

    await auth_sessions.mark_auth_session_used(auth_session_id)
    try:
        tokens = await oauth.exchange_code_for_tokens(code=code, pkce_verifier=flow.pkce_verifier, provider=flow.provider)
        info = await oauth.get_user_info(tokens.access_token, flow.provider)
    except Exception:
        logger.exception("OAuth exchange with {} failed", flow.provider)
        return await give_up()

    profile = ProfileService(db).provision(
        flow.provider,
        info.sub,
        info.email,
        info.model_dump(exclude_none=True),
        email_verified=info.email_verified,
    )
    db.commit()
    await auth_sessions.delete_auth_session(auth_session_id)
    return await _sign_in(request, profile, flow.provider, flow.return_to or "/", sessions, hub)


@router.get("/session", response_model=AuthState)
async def get_auth_state(request: Request, user: Profile | None = Depends(get_optional_user)) -> AuthState:
    """Who is signed in, with a CSRF token for their writes."""
    if user is None:
        return AuthState(authenticated=False)
    return AuthState(
        authenticated=True,
        user=asdict(auth_user_from_profile(user)),
        csrf_token=generate_csrf_token(request.state.session_id),
    )


@router.post("/logout", dependencies=protected_write)
async def logout(
    request: Request,
    response: Response,
    sessions: UserSessionService = Depends(get_user_session_service),
    hub: ChangeHub = Depends(get_change_hub),
) -> dict[str, str]:
    session_id = request.cookies.get(SESSION_COOKIE)
    if not session_id:
        raise HTTPException(status_code=401, detail="No session found")

    ended = await sessions.get_user_session(session_id)
    await sessions.delete_user_session(session_id)
    response.delete_cookie(SESSION_COOKIE, path="/")
    if ended is not None:
        publish_auth_event(hub, "SIGNED_OUT", ended.user_id)
    return {"message": "Logged out"}
