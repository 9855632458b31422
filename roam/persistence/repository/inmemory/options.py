"""In-memory network options repository for testing."""

from typing import Optional

from roam.domain.repository.options import NetworkOptionsRepository
from roam.domain.value import NetworkOption


class InMemoryNetworkOptionsRepository(NetworkOptionsRepository):
    """In-memory implementation of NetworkOptionsRepository for testing."""

    def __init__(self) -> None:
        self._options: dict[NetworkOption, str] = {}

    async def get(self, option: NetworkOption) -> Optional[str]:
        return self._options.get(option)

    async def set(self, option: NetworkOption, value: str) -> None:
        self._options[option] = value
