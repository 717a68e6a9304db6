"""Liveness and readiness probes."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.muslimhunt.api.http.app_data import ApplicationDependencies
from src.muslimhunt.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    return {"status": "healthy", "service": "muslimhunt"}


def _database_check(deps: ApplicationDependencies) -> dict[str, Any]:
    kind = "postgresql" if "postgresql" in get_config().database.url else "sqlite"
    try:
        ok = deps.database_service.health_check()
    except Exception as e:
        return {"status": "unhealthy", "type": kind, "error": str(e)}
    return {"status": "healthy" if ok else "unhealthy", "type": kind}


async def _session_store_check(deps: ApplicationDependencies) -> dict[str, Any]:
    kind = "redis" if get_config().redis.enabled else "in-memory"
    try:
        ok = await deps.session_storage.ping()
    except Exception as e:
        return {"status": "degraded", "type": kind, "error": str(e)}
    return {"status": "healthy" if ok else "degraded", "type": kind}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """503 while the database is down. A failing session store only degrades the report."""
    deps: ApplicationDependencies = request.app.state.app_dependencies
    checks = {
        "database": _database_check(deps),
        "session_store": await _session_store_check(deps),
        "realtime": {"status": "healthy", "subscribers": deps.change_hub.subscriber_count},
    }
    ready = checks["database"]["status"] == "healthy"
    body = {
        "status": "ready" if ready else "not_ready",
        "environment": get_config().app.environment,
        "checks": checks,
    }
    return body if ready else JSONResponse(status_code=503, content=body)
