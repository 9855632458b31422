"""Dependency injection module.

Providers are listed once in ``PROVIDERS``. Entries that declare a
``__mock_component__`` are swappable: production implementations live under
``roam.util.di.infrastructure``, mocks are registered by subclassing from
``tests.di``.
"""

from typing import Type, get_args

from dishka import Provider

from roam.util.di.application import ProdApplicationProvider
from roam.util.di.base import Component, ProviderBase
from roam.util.di.core import ProdConfigProvider
from roam.util.di.domain import ProdDomainProvider
from roam.util.di.infrastructure import (
    CacheProvider,
    ClockProvider,
    PersistenceProvider,
    ProdCacheProvider,
    ProdClockProvider,
    ProdPersistenceProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Swappable
    PersistenceProvider,
    CacheProvider,
    ClockProvider,
]

COMPONENTS: frozenset[Component] = frozenset(get_args(Component))


def _implementation(base: Type[ProviderBase], mock: bool) -> Type[ProviderBase]:
    for impl in base.__subclasses__():
        if impl.__is_mock__ == mock:
            return impl
    kind = "mock" if mock else "production"
    raise ValueError(f"No {kind} implementation for {base.__mock_component__}")


def resolve_providers(
    mocked: set[Component] | frozenset[Component] = frozenset(),
) -> list[Provider]:
    """Instantiate every provider, swapping in mocks for the named components.

    Args:
        mocked: Components to replace with their mock implementation

    Returns:
        Provider instances ready for ``make_async_container``

    Raises:
        ValueError: If a component is unknown or has no matching implementation
    """
    unknown = set(mocked) - COMPONENTS
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    providers: list[Provider] = []
    for base in PROVIDERS:
        component = base.__mock_component__
        if component is None:
            providers.append(base())
        else:
            providers.append(_implementation(base, component in mocked)())
    return providers


__all__ = [
    "COMPONENTS",
    "Component",
    "PROVIDERS",
    "ProviderBase",
    "resolve_providers",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "CacheProvider",
    "ClockProvider",
    "PersistenceProvider",
    "ProdCacheProvider",
    "ProdClockProvider",
    "ProdPersistenceProvider",
]
