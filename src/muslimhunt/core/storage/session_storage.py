"""Key/value stores for sessions and single-use markers.

Every value is a pydantic model stored as JSON with a TTL. Redis is used when
it is enabled and answers a ping; otherwise entries live in process memory
and are lost on restart.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


class SessionStorage(ABC):
    @abstractmethod
    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None: ...

    @abstractmethod
    async def set_if_absent(self, key: str, value: BaseModel, ttl_seconds: int) -> bool:
        """Store only when ``key`` is free. True when this call stored it."""

    @abstractmethod
    async def get(self, key: str, model_class: type[M]) -> M | None: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def exists(self, key: str) -> bool: ...

    @abstractmethod
    async def ping(self) -> bool: ...


class InMemorySessionStorage(SessionStorage):
    def __init__(self) -> None:
        # key -> (deadline on the monotonic clock, JSON text)
        self._entries: dict[str, tuple[float, str]] = {}

    def _read(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        deadline, payload = entry
        if time.monotonic() >= deadline:
            self._entries.pop(key, None)
            return None
        return payload

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self._entries[key] = (time.monotonic() + ttl_seconds, value.model_dump_json())

    async def set_if_absent(self, key: str, value: BaseModel, ttl_seconds: int) -> bool:
        if self._read(key) is not None:
            return False
        await self.set(key, value, ttl_seconds)
        return True

    async def get(self, key: str, model_class: type[M]) -> M | None:
        payload = self._read(key)
        if payload is None:
            return None
        try:
            return model_class.model_validate_json(payload)
        except ValidationError:
            logger.warning("Dropping unreadable session entry {}", key)
            self._entries.pop(key, None)
            return None

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._read(key) is not None

    async def ping(self) -> bool:
        return True


@contextmanager
def _redis_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except Exception as e:
        raise RuntimeError(f"Redis {operation} failed: {e}") from e


class RedisSessionStorage(SessionStorage):
    def __init__(self, redis_client) -> None:
        self._redis = redis_client

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        with _redis_errors("set"):
            await self._redis.set(key, value.model_dump_json(), ex=ttl_seconds)

    async def set_if_absent(self, key: str, value: BaseModel, ttl_seconds: int) -> bool:
        with _redis_errors("set"):
            stored = await self._redis.set(key, value.model_dump_json(), ex=ttl_seconds, nx=True)
        return bool(stored)

    async def get(self, key: str, model_class: type[M]) -> M | None:
        with _redis_errors("get"):
            raw = await self._redis.get(key)
        if raw is None:
            return None
        return model_class.model_validate_json(raw)

    async def delete(self, key: str) -> None:
        with _redis_errors("delete"):
            await self._redis.delete(key)

    async def exists(self, key: str) -> bool:
        with _redis_errors("exists"):
            return bool(await self._redis.exists(key))

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except Exception as e:
            logger.warning("Redis ping failed: {}", e)
            return False


_storage: SessionStorage | None = None


async def _connect() -> SessionStorage:
    import redis.asyncio as redis

    from src.muslimhunt.runtime.context import get_config

    redis_config = get_config().redis
    if not redis_config.enabled:
        logger.info("Sessions kept in memory (Redis disabled)")
        return InMemorySessionStorage()

    storage = RedisSessionStorage(
        redis.from_url(
            redis_config.connection_string,
            decode_responses=redis_config.decode_responses,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
    )
    if await storage.ping():
        logger.info("Sessions kept in Redis")
        return storage

    logger.warning("Redis unreachable, sessions kept in memory")
    return InMemorySessionStorage()


async def get_session_storage() -> SessionStorage:
    """Process-wide store, chosen on first use."""
    global _storage
    if _storage is None:
        _storage = await _connect()
    return _storage


def _reset_storage() -> None:
    global _storage
    _storage = None
