"""Keyed cache implementations."""

from roam.persistence.cache.memory import InMemoryCache
from roam.persistence.cache.redis import RedisCache

__all__ = ["InMemoryCache", "RedisCache"]
