"""Domain layer DI providers."""

from dishka import Scope, provide

from roam.application.hooks import register_hooks
from roam.config import AuthSettings, NetworkOptionDefaults, NetworkSettings, Settings
from roam.domain.repository import (
    Cache,
    IdentityRepository,
    NetworkOptionsRepository,
    PendingCleanupRepository,
    SignupRepository,
    SiteRepository,
)
from roam.domain.service import (
    AccountLinker,
    ConfigService,
    IdentityService,
    NetworkPolicy,
    RateLimiter,
    RoamingSessionManager,
    SessionService,
    SignupService,
    SiteScopeService,
    SiteService,
    TokenService,
)
from roam.util.clock import Clock
from roam.util.di.base import ProviderBase
from roam.util.events import EventBus, InProcessEventBus


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    The network policy only depends on settings and lives for the whole app.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_network_policy(self, network_settings: NetworkSettings) -> NetworkPolicy:
        """Provide the network policy."""
        return NetworkPolicy(network_settings=network_settings)

    @provide
    def get_session_service(self, auth_settings: AuthSettings, clock: Clock) -> SessionService:
        """Provide local session domain service."""
        return SessionService(auth_settings=auth_settings, clock=clock)

    @provide
    def get_config_service(
        self,
        options_repository: NetworkOptionsRepository,
        cache: Cache,
        defaults: NetworkOptionDefaults,
    ) -> ConfigService:
        """Provide network configuration domain service."""
        return ConfigService(
            options_repository=options_repository, cache=cache, defaults=defaults
        )

    @provide
    def get_token_service(self, config_service: ConfigService, clock: Clock) -> TokenService:
        """Provide remote-login token domain service."""
        return TokenService(config_service=config_service, clock=clock)

    @provide
    def get_rate_limiter(self, cache: Cache, clock: Clock) -> RateLimiter:
        """Provide attempt rate limiter."""
        return RateLimiter(cache=cache, clock=clock)

    @provide
    def get_identity_service(
        self, identity_repository: IdentityRepository, policy: NetworkPolicy
    ) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(identity_repository=identity_repository, policy=policy)

    @provide
    def get_site_service(self, site_repository: SiteRepository) -> SiteService:
        """Provide site domain service."""
        return SiteService(site_repository=site_repository)

    @provide
    def get_roaming_session_manager(
        self,
        config_service: ConfigService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
        settings: Settings,
        clock: Clock,
    ) -> RoamingSessionManager:
        """Provide roaming session manager."""
        return RoamingSessionManager(
            config_service=config_service,
            identity_service=identity_service,
            policy=policy,
            settings=settings,
            clock=clock,
        )

    @provide
    def get_account_linker(
        self,
        identity_repository: IdentityRepository,
        site_repository: SiteRepository,
        identity_service: IdentityService,
        token_service: TokenService,
        rate_limiter: RateLimiter,
        config_service: ConfigService,
        cache: Cache,
        policy: NetworkPolicy,
        clock: Clock,
    ) -> AccountLinker:
        """Provide account linking domain service."""
        return AccountLinker(
            identity_repository=identity_repository,
            site_repository=site_repository,
            identity_service=identity_service,
            token_service=token_service,
            rate_limiter=rate_limiter,
            config_service=config_service,
            cache=cache,
            policy=policy,
            clock=clock,
        )

    @provide
    def get_signup_service(
        self, signup_repository: SignupRepository, clock: Clock
    ) -> SignupService:
        """Provide signup reservation domain service."""
        return SignupService(signup_repository=signup_repository, clock=clock)

    @provide
    def get_site_scope_service(
        self,
        identity_repository: IdentityRepository,
        cleanup_repository: PendingCleanupRepository,
    ) -> SiteScopeService:
        """Provide site scoping domain service."""
        return SiteScopeService(
            identity_repository=identity_repository,
            cleanup_repository=cleanup_repository,
        )

    @provide
    def get_event_bus(
        self,
        roaming_session_manager: RoamingSessionManager,
        signup_service: SignupService,
        site_scope_service: SiteScopeService,
    ) -> EventBus:
        """Provide the host event bus with Roam's handlers registered."""
        return register_hooks(
            InProcessEventBus(),
            roaming_session_manager,
            signup_service,
            site_scope_service,
        )
