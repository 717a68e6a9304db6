"""Request quotas.

With Redis the quotas are enforced by fastapi-limiter and shared between
workers. Without it every process keeps its own sliding windows.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import HTTPException, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from loguru import logger

from src.muslimhunt.runtime.context import get_config

RateLimiterType = Callable[[Request, Response], Awaitable[Any]]
RateLimiterFactory = Callable[[int, int, bool, bool], RateLimiterType]


class DefaultLocalRateLimiter:
    """Sliding window per caller. A caller is the signed-in user, else the client IP."""

    def __init__(self, times: int, milliseconds: int, per_endpoint: bool, per_method: bool) -> None:
        self.times = times
        self.window = max(1.0, milliseconds / 1000)
        self.per_endpoint = per_endpoint
        self.per_method = per_method
        self._windows: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()

    def caller_key(self, request: Request) -> str:
        uid = getattr(request.state, "uid", None)
        if uid is not None:
            parts = [f"user:{uid}"]
        else:
            parts = [f"ip:{request.client.host if request.client else 'anonymous'}"]
        if self.per_method:
            parts.append(request.method)
        if self.per_endpoint:
            route = request.scope.get("route")
            parts.append(getattr(route, "path", None) or request.url.path.rstrip("/"))
        return ":".join(parts)

    async def __call__(self, request: Request, response: Response) -> None:
        key = self.caller_key(request)
        now = time.monotonic()
        async with self._lock:
            hits = self._windows.setdefault(key, deque())
            while hits and now - hits[0] >= self.window:
                hits.popleft()
            if len(hits) >= self.times:
                retry_after = int(self.window - (now - hits[0])) + 1
                raise HTTPException(
                    status_code=429,
                    detail="Too Many Requests",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)
            self._forget_idle(now)

    def _forget_idle(self, now: float) -> None:
        idle = [k for k, hits in self._windows.items() if not hits or now - hits[-1] >= self.window]
        for key in idle:
            del self._windows[key]

    async def cleanup(self) -> None:
        async with self._lock:
            self._windows.clear()


def _redis_limiter(times: int, milliseconds: int, per_endpoint: bool, per_method: bool) -> RateLimiterType:
    return RateLimiter(times=times, milliseconds=milliseconds)


def _local_limiter(times: int, milliseconds: int, per_endpoint: bool, per_method: bool) -> RateLimiterType:
    return DefaultLocalRateLimiter(times, milliseconds, per_endpoint, per_method)


class _Registry:
    """Active limiter factory plus the limiters built from it, one per quota."""

    def __init__(self) -> None:
        self.factory: RateLimiterFactory | None = None
        self.limiters: dict[tuple[int, int, bool, bool], RateLimiterType] = {}

    def limiter(self, requests: int, window_ms: int) -> RateLimiterType:
        if self.factory is None:
            raise RuntimeError("Rate limiter not configured")
        settings = get_config().rate_limiter
        quota = (requests, window_ms, settings.per_endpoint, settings.per_method)
        if quota not in self.limiters:
            self.limiters[quota] = self.factory(*quota)
        return self.limiters[quota]


_registry = _Registry()


def configure_rate_limiter(limiter_factory: RateLimiterFactory | None = None) -> None:
    """Choose how limiters are built. Without a factory, fastapi-limiter (Redis) is used."""
    if limiter_factory is DefaultLocalRateLimiter:
        limiter_factory = _local_limiter
    _registry.limiters.clear()
    _registry.factory = limiter_factory or _redis_limiter
    logger.info(
        "Rate limiting via {}", "Redis" if _registry.factory is _redis_limiter else "process memory"
    )


def get_rate_limiter(requests: int | None = None, window_ms: int | None = None) -> RateLimiterType:
    settings = get_config().rate_limiter
    return _registry.limiter(
        settings.requests if requests is None else requests,
        settings.window_ms if window_ms is None else window_ms,
    )


def _quota(resolve: Callable[[], tuple[int | None, int | None]]) -> RateLimiterType:
    async def dependency(request: Request, response: Response) -> Any:
        if not get_config().rate_limiter.enabled:
            return None
        return await get_rate_limiter(*resolve())(request, response)

    return dependency


def rate_limit(requests: int | None = None, window_ms: int | None = None) -> RateLimiterType:
    """Dependency enforcing ``requests`` per ``window_ms``, defaulting to the config quota."""
    return _quota(lambda: (requests, window_ms))


def magic_link_rate_limit() -> RateLimiterType:
    """Tighter quota for sign-in emails."""
    return _quota(lambda: (get_config().rate_limiter.magic_link_requests, None))


async def close_rate_limiter() -> None:
    for limiter in _registry.limiters.values():
        if isinstance(limiter, DefaultLocalRateLimiter):
            await limiter.cleanup()
    _registry.limiters.clear()

    if _registry.factory is _redis_limiter:
        try:
            await FastAPILimiter.close()
        except Exception as e:
            logger.warning("Error closing FastAPILimiter: {}", e)
    _registry.factory = None
