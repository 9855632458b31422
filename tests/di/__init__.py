"""Mock providers for testing."""

from .cache import MockCacheProvider
from .clock import MockClockProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockCacheProvider",
    "MockClockProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
