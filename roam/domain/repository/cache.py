"""Keyed cache interface.

Shared between concurrent requests; callers must tolerate lost updates.
"""

from abc import ABC, abstractmethod
from typing import Optional


class Cache(ABC):
    """String key/value cache with per-key expiry."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get a value, None if missing or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Set a value that expires after ``ttl_seconds``."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value if present."""
        pass
