"""In-memory implementation of the keyed cache for testing."""

from typing import Optional

from roam.domain.repository import Cache
from roam.util.clock import Clock


class InMemoryCache(Cache):
    """Dict-backed cache whose expiry follows the injected clock."""

    def __init__(self, clock: Clock) -> None:
        self.clock = clock
        self._values: dict[str, tuple[str, int]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._values.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock.now() >= expires_at:
            del self._values[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._values[key] = (value, self.clock.now() + max(1, int(ttl_seconds)))

    async def delete(self, key: str) -> None:
        self._values.pop(key, None)
