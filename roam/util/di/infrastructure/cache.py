"""Keyed cache infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from roam.config import CacheSettings
from roam.domain.repository import Cache
from roam.persistence.cache import RedisCache
from roam.util.di.base import ProviderBase
from roam.util.observability import instrument_redis


class CacheProvider(ProviderBase):
    """Cache component base."""

    __mock_component__ = "cache"


class ProdCacheProvider(CacheProvider):
    """Production cache provider using Redis."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_cache(self, cache_settings: CacheSettings) -> AsyncIterator[Cache]:
        """Provide the shared Redis cache, closed when the app shuts down."""
        instrument_redis()
        cache = RedisCache.from_settings(cache_settings)
        yield cache
        await cache.close()
