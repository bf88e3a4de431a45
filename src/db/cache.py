"""Key/value cache abstraction over Redis.

The claims service only needs get / set-with-TTL / delete, so any backend
exposing those three operations can stand in (tests use an in-memory dict).

Usage:
    from src.db.cache import RedisCache
    from src.db.engine import redis_client

    cache = RedisCache(redis_client)
    await cache.set("role_claims:Admin", "[...]", ttl=3600)
"""

from __future__ import annotations

from typing import Protocol

import redis.asyncio as aioredis


class Cache(Protocol):
    """Minimal cache contract consumed by the application."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: int) -> None: ...

    async def delete(self, key: str) -> None: ...


class RedisCache:
    """Cache backed by a redis.asyncio client created with decode_responses=True.

    Errors are not handled here; callers decide whether a cache failure is fatal.
    """

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def get(self, key: str) -> str | None:
        value = await self._redis.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._redis.setex(key, ttl, value)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)
