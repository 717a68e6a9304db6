"""Session store backends."""

import asyncio
import time
from unittest.mock import AsyncMock

import pytest
from pydantic import BaseModel

from src.muslimhunt.core.storage.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
    _reset_storage,
    get_session_storage,
)


class StoredSession(BaseModel):
    id: str
    data: str
    created_at: int


class TestInMemory:
    def setup_method(self):
        self.storage = InMemorySessionStorage()

    @pytest.mark.asyncio
    async def test_round_trips_models(self):
        session = StoredSession(id="s-1", data="payload", created_at=int(time.time()))

        await self.storage.set("session-1", session, 60)
        retrieved = await self.storage.get("session-1", StoredSession)

        assert retrieved == session

    @pytest.mark.asyncio
    async def test_missing_key(self):
        assert await self.storage.get("missing", StoredSession) is None

    @pytest.mark.asyncio
    async def test_entries_expire(self):
        session = StoredSession(id="s-2", data="x", created_at=0)
        await self.storage.set("short", session, 1)
        assert await self.storage.exists("short")

        await asyncio.sleep(1.1)

        assert await self.storage.get("short", StoredSession) is None

    @pytest.mark.asyncio
    async def test_set_if_absent_only_once(self):
        session = StoredSession(id="s-3", data="x", created_at=0)

        assert await self.storage.set_if_absent("once", session, 60) is True
        assert await self.storage.set_if_absent("once", session, 60) is False

    @pytest.mark.asyncio
    async def test_delete(self):
        await self.storage.set("gone", StoredSession(id="s", data="x", created_at=0), 60)
        await self.storage.delete("gone")
        assert not await self.storage.exists("gone")

    @pytest.mark.asyncio
    async def test_unreadable_entry_is_dropped(self):
        await self.storage.set("bad", StoredSession(id="s", data="x", created_at=0), 60)

        class Other(BaseModel):
            required_field: int

        assert await self.storage.get("bad", Other) is None
        assert not await self.storage.exists("bad")


class TestRedis:
    @pytest.mark.asyncio
    async def test_ping_uses_client(self):
        client = AsyncMock()
        client.ping.return_value = True
        storage = RedisSessionStorage(client)

        assert await storage.ping() is True
        client.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ping_failure_is_reported(self):
        client = AsyncMock()
        client.ping.side_effect = ConnectionError("down")

        assert await RedisSessionStorage(client).ping() is False

    @pytest.mark.asyncio
    async def test_set_if_absent_uses_nx(self):
        client = AsyncMock()
        client.set.return_value = None
        storage = RedisSessionStorage(client)

        stored = await storage.set_if_absent("k", StoredSession(id="s", data="x", created_at=0), 30)

        assert stored is False
        assert client.set.await_args.kwargs == {"ex": 30, "nx": True}

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self):
        client = AsyncMock()
        client.get.return_value = b'{"id": "s", "data": "x", "created_at": 1}'

        result = await RedisSessionStorage(client).get("k", StoredSession)

        assert result == StoredSession(id="s", data="x", created_at=1)

    @pytest.mark.asyncio
    async def test_errors_are_wrapped(self):
        client = AsyncMock()
        client.delete.side_effect = OSError("boom")

        with pytest.raises(RuntimeError, match="Redis delete failed"):
            await RedisSessionStorage(client).delete("k")


@pytest.mark.asyncio
async def test_storage_defaults_to_memory_without_redis():
    _reset_storage()
    try:
        storage = await get_session_storage()
        assert isinstance(storage, InMemorySessionStorage)
        assert await get_session_storage() is storage
    finally:
        _reset_storage()
