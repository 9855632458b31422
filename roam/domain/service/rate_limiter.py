"""Attempt rate limiting domain service."""

import json

import logfire

from roam.domain.repository import Cache
from roam.util.clock import Clock

from .base import Service


class RateLimiter(Service):
    """Fixed-window attempt counter stored in the keyed cache.

    The read and the write are separate cache calls. Concurrent attempts for
    the same key may lose an increment; the limiter only needs to be roughly
    right to blunt abuse.
    """

    def __init__(self, cache: Cache, clock: Clock) -> None:
        self.cache = cache
        self.clock = clock

    @staticmethod
    def _cache_key(key: str) -> str:
        return f"ratelimit:{key}"

    async def check_and_increment(self, key: str, max_attempts: int, window: int) -> bool:
        """Count an attempt and report whether it is allowed.

        Args:
            key: Counter key (e.g. the target identity)
            max_attempts: Attempts allowed within one window
            window: Window length in seconds

        Returns:
            True if the attempt is allowed
        """
        cache_key = self._cache_key(key)
        now = self.clock.now()
        counter = self._parse(await self.cache.get(cache_key))

        if counter is None or counter["window_expiry"] <= now:
            await self._store(cache_key, 1, now + window, now)
            return True

        if counter["count"] >= max_attempts:
            logfire.warn("Rate limit exceeded", key=key, count=counter["count"])
            return False

        await self._store(cache_key, counter["count"] + 1, counter["window_expiry"], now)
        return True

    async def _store(self, cache_key: str, count: int, window_expiry: int, now: int) -> None:
        value = json.dumps({"count": count, "window_expiry": window_expiry})
        await self.cache.set(cache_key, value, max(1, window_expiry - now))

    @staticmethod
    def _parse(raw: str | None) -> dict[str, int] | None:
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            return {"count": int(data["count"]), "window_expiry": int(data["window_expiry"])}
        except (ValueError, KeyError, TypeError):
            # Unreadable counters start a fresh window
            return None
