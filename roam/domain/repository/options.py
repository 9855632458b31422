"""Network options repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from roam.domain.value import NetworkOption


class NetworkOptionsRepository(ABC):
    """Store for tenant-wide options, kept as raw strings."""

    @abstractmethod
    async def get(self, option: NetworkOption) -> Optional[str]:
        """Get the stored value of an option, None if never saved."""
        pass

    @abstractmethod
    async def set(self, option: NetworkOption, value: str) -> None:
        """Store the value of an option."""
        pass
