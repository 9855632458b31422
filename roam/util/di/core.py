"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from roam.config import (
    AuthSettings,
    CacheSettings,
    NetworkOptionDefaults,
    NetworkSettings,
    Settings,
)
from roam.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_network_settings(self, settings: Settings) -> NetworkSettings:
        """Provide network settings."""
        return settings.network

    @provide(scope=Scope.APP)
    def provide_option_defaults(self, settings: Settings) -> NetworkOptionDefaults:
        """Provide fallback values of the network options."""
        return settings.network.defaults

    @provide(scope=Scope.APP)
    def provide_cache_settings(self, settings: Settings) -> CacheSettings:
        """Provide cache settings."""
        return settings.cache
