"""Key/value storage for sessions and single-use markers."""

from .session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
    SessionStorage,
    get_session_storage,
)

__all__ = [
    "SessionStorage",
    "InMemorySessionStorage",
    "RedisSessionStorage",
    "get_session_storage",
]
