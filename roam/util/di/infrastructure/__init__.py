"""Infrastructure providers."""

# Import bases
from .cache import CacheProvider
from .clock import ClockProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .cache import ProdCacheProvider  # noqa: F401
from .clock import ProdClockProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "CacheProvider",
    "ClockProvider",
    "PersistenceProvider",
    "ProdCacheProvider",
    "ProdClockProvider",
    "ProdPersistenceProvider",
]
