"""Redis implementation of the keyed cache."""

from typing import Optional

import redis.asyncio as aioredis

from roam.config import CacheSettings
from roam.domain.repository import Cache


class RedisCache(Cache):
    """Keyed cache backed by Redis, shared by every process of the network."""

    def __init__(self, client: aioredis.Redis, key_prefix: str) -> None:
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> "RedisCache":
        """Create a cache with its own connection pool."""
        client = aioredis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.socket_timeout,
            socket_connect_timeout=settings.socket_timeout,
        )
        return cls(client, settings.key_prefix)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(self._key(key))

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        # Redis rejects non-positive expiries
        await self.client.set(self._key(key), value, ex=max(1, int(ttl_seconds)))

    async def delete(self, key: str) -> None:
        await self.client.delete(self._key(key))

    async def close(self) -> None:
        await self.client.aclose()
