"""In-memory repository implementations for testing."""

from .cleanup import InMemoryPendingCleanupRepository
from .identity import InMemoryIdentityRepository
from .options import InMemoryNetworkOptionsRepository
from .signup import InMemorySignupRepository
from .site import InMemorySiteRepository

__all__ = [
    "InMemoryIdentityRepository",
    "InMemoryNetworkOptionsRepository",
    "InMemoryPendingCleanupRepository",
    "InMemorySignupRepository",
    "InMemorySiteRepository",
]
