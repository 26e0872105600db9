from __future__ import annotations

import logging
from typing import Protocol

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local string store used when Redis is not configured or unreachable."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)


class CacheClient:
    def __init__(self, redis_url: str | None) -> None:
        self._redis_url = redis_url
        self._redis: Redis | None = None
        self._memory = MemoryStore()

    @property
    def backend(self) -> str:
        return "redis" if self._redis else "memory"

    async def connect(self) -> None:
        if not self._redis_url:
            logger.info("No Redis URL configured; using in-memory rate cache")
            return
        client = Redis.from_url(self._redis_url, decode_responses=True)
        try:
            await client.ping()
            self._redis = client
            logger.info("Redis cache connected")
        except Exception as exc:
            logger.warning("Redis unavailable; continuing with in-memory cache: %s", exc)
            await client.aclose()
            self._redis = None

    async def get(self, key: str) -> str | None:
        if not self._redis:
            return await self._memory.get(key)
        value = await self._redis.get(key)
        if value is None:
            return None
        return str(value)

    async def set(self, key: str, value: str) -> None:
        if not self._redis:
            await self._memory.set(key, value)
            return
        # No expiry: stale entries stay readable as a degraded fallback.
        await self._redis.set(key, value)

    async def close(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None
