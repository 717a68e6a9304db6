"""The ASGI application: routers, middleware and service wiring."""

from contextlib import asynccontextmanager

import redis.asyncio as redis_async
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi_limiter import FastAPILimiter
from loguru import logger

from src.muslimhunt.api.http.app_data import ApplicationDependencies
from src.muslimhunt.api.http.middleware.limiter import (
    DefaultLocalRateLimiter,
    close_rate_limiter,
    configure_rate_limiter,
)
from src.muslimhunt.api.http.middleware.request_context import SecurityHeadersMiddleware, log_requests
from src.muslimhunt.api.http.routers import auth, health, navigation, realtime
from src.muslimhunt.api.http.routers.service import (
    admin,
    categories,
    comments,
    forum,
    guide,
    newsletter,
    notifications,
    products,
    profiles,
    stories,
)
from src.muslimhunt.api.utils.app_startup import configure_logging
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
from src.muslimhunt.core.services.database.db_manage import DbManageService
from src.muslimhunt.core.storage.session_storage import get_session_storage
from src.muslimhunt.runtime.context import get_config

__all__ = ["app", "startup", "shutdown", "build_dependencies"]

ROUTERS = (
    (health.router, ""),
    (auth.router, "/auth"),
    (navigation.router, ""),
    (realtime.router, ""),
    (products.router, ""),
    (comments.router, ""),
    (categories.router, ""),
    (forum.router, ""),
    (guide.router, ""),
    (profiles.router, ""),
    (notifications.router, ""),
    (stories.router, ""),
    (admin.router, ""),
    (newsletter.router, ""),
)

configure_logging()


async def build_dependencies(database_service: DbSessionService | None = None) -> ApplicationDependencies:
    storage = await get_session_storage()
    verifier = JwtVerificationService()
    generator = JwtGeneratorService()
    return ApplicationDependencies(
        session_storage=storage,
        jwt_verify_service=verifier,
        jwt_generation_service=generator,
        oauth_client_service=OAuthClientService(),
        magic_link_service=MagicLinkService(storage, generator, verifier),
        user_session_service=UserSessionService(storage),
        auth_session_service=AuthSessionService(storage),
        database_service=database_service or DbSessionService(),
        file_storage_service=FileStorageService(),
        change_hub=ChangeHub(),
    )


async def _start_rate_limiter() -> None:
    redis_config = get_config().redis
    if redis_config.enabled and redis_config.url:
        try:
            client = redis_async.from_url(
                redis_config.connection_string,
                encoding="utf-8",
                decode_responses=redis_config.decode_responses,
            )
            await FastAPILimiter.init(client)
        except Exception:
            logger.exception("Could not initialise the Redis rate limiter")
            if get_config().app.environment == "production":
                raise
        else:
            configure_rate_limiter()
            return
    configure_rate_limiter(limiter_factory=DefaultLocalRateLimiter)


async def startup() -> None:
    config = get_config()
    logger.info("Starting Muslim Hunt ({})", config.app.environment)

    deps = await build_dependencies()
    app.state.app_dependencies = deps
    DbManageService(deps.database_service.engine).create_all()
    deps.file_storage_service.ensure_buckets()

    for name, provider in config.oauth.providers.items():
        if not provider.client_id:
            logger.warning("OAuth provider {} has no client id", name)

    await _start_rate_limiter()


async def shutdown() -> None:
    logger.info("Shutting down")
    await close_rate_limiter()


@asynccontextmanager
async def lifespan(_: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


def _cors_origins() -> list[str]:
    cors = get_config().app.cors
    if get_config().app.environment == "production" and "*" in cors.origins:
        raise RuntimeError("Wildcard CORS origin cannot be combined with credentials in production")
    return cors.origins


_public_docs = get_config().app.environment != "production"
app = FastAPI(
    title="Muslim Hunt",
    lifespan=lifespan,
    docs_url="/docs" if _public_docs else None,
    redoc_url="/redoc" if _public_docs else None,
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)
app.middleware("http")(log_requests)

for router, prefix in ROUTERS:
    app.include_router(router, prefix=prefix)

app.mount("/storage", StaticFiles(directory=get_config().storage.root, check_dir=False), name="storage")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=get_config().app.host, port=get_config().app.port, access_log=False)
