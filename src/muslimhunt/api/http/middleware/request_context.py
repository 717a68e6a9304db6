"""Per-request logging context and response headers."""

import time
import uuid

from fastapi import Request
from fastapi.exceptions import HTTPException, RequestValidationError
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from src.muslimhunt.core.security import client_ip_from_request
from src.muslimhunt.runtime.context import get_config

REQUEST_ID_HEADER = "X-Request-ID"

BASE_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=()",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in BASE_SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains; preload"
            )
        return response


def _failure(status_code: int, detail, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": request_id},
        headers={REQUEST_ID_HEADER: request_id},
    )


async def log_requests(request: Request, call_next) -> Response:
    """Tag every log line of a request with its id and log how it ended.

    Errors that escape the routers become JSON bodies carrying the request id.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    started = time.perf_counter()

    def finished(**fields):
        elapsed = round((time.perf_counter() - started) * 1000, 1)
        return logger.bind(duration_ms=elapsed, **fields)

    with logger.contextualize(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        client_ip=client_ip_from_request(request) or "unknown",
        user_agent=request.headers.get("user-agent", "unknown"),
    ):
        logger.info("request.start")
        try:
            response = await call_next(request)
        except HTTPException as exc:
            finished(status_code=exc.status_code).warning("request.error")
            return _failure(exc.status_code, exc.detail, request_id)
        except RequestValidationError as exc:
            finished(status_code=422).warning("request.validation_error")
            return _failure(422, exc.errors(), request_id)
        except Exception as exc:
            finished(status_code=500, error_type=type(exc).__name__).exception("request.error")
            return _failure(500, "Internal Server Error", request_id)

        finished(status_code=response.status_code).info("request.end")
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
