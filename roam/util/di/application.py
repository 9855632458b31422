"""Application layer DI providers."""

from dishka import Scope, provide

from roam.application.usecase.account import (
    GetLinkedAccountTokenUseCase,
    GetLinkedAccountsUseCase,
    GetLinkNonceUseCase,
    LinkAccountUseCase,
    UnlinkAccountUseCase,
)
from roam.application.usecase.auth import (
    GetCurrentIdentityUseCase,
    LoginUseCase,
    LogoutUseCase,
    RemoteLoginUseCase,
)
from roam.application.usecase.network import (
    GetNetworkOptionsUseCase,
    RotateSecretKeyUseCase,
    UpdateNetworkOptionsUseCase,
)
from roam.application.usecase.signup import ValidateSignupUseCase
from roam.application.usecase.site import RemoveMemberUseCase
from roam.domain.service import (
    AccountLinker,
    ConfigService,
    IdentityService,
    NetworkPolicy,
    SessionService,
    SignupService,
    SiteScopeService,
    SiteService,
)
from roam.util.di.base import ProviderBase
from roam.util.events import EventBus


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Auth use cases
    @provide
    def get_login_use_case(
        self, identity_service: IdentityService, event_bus: EventBus
    ) -> LoginUseCase:
        """Provide local login use case."""
        return LoginUseCase(identity_service=identity_service, event_bus=event_bus)

    @provide
    def get_logout_use_case(self, event_bus: EventBus) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(event_bus=event_bus)

    @provide
    def get_remote_login_use_case(
        self, account_linker: AccountLinker, site_service: SiteService
    ) -> RemoteLoginUseCase:
        """Provide remote login use case."""
        return RemoteLoginUseCase(account_linker=account_linker, site_service=site_service)

    @provide
    def get_current_identity_use_case(
        self, identity_service: IdentityService, policy: NetworkPolicy
    ) -> GetCurrentIdentityUseCase:
        """Provide get current identity use case."""
        return GetCurrentIdentityUseCase(identity_service=identity_service, policy=policy)

    # Account use cases
    @provide
    def get_link_account_use_case(
        self,
        account_linker: AccountLinker,
        session_service: SessionService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> LinkAccountUseCase:
        """Provide link account use case."""
        return LinkAccountUseCase(
            account_linker=account_linker,
            session_service=session_service,
            identity_service=identity_service,
            policy=policy,
        )

    @provide
    def get_unlink_account_use_case(
        self, account_linker: AccountLinker, identity_service: IdentityService
    ) -> UnlinkAccountUseCase:
        """Provide unlink account use case."""
        return UnlinkAccountUseCase(
            account_linker=account_linker, identity_service=identity_service
        )

    @provide
    def get_linked_account_token_use_case(
        self,
        account_linker: AccountLinker,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> GetLinkedAccountTokenUseCase:
        """Provide get linked account token use case."""
        return GetLinkedAccountTokenUseCase(
            account_linker=account_linker,
            identity_service=identity_service,
            policy=policy,
        )

    @provide
    def get_linked_accounts_use_case(
        self, account_linker: AccountLinker
    ) -> GetLinkedAccountsUseCase:
        """Provide get linked accounts use case."""
        return GetLinkedAccountsUseCase(account_linker=account_linker)

    @provide
    def get_link_nonce_use_case(self, session_service: SessionService) -> GetLinkNonceUseCase:
        """Provide link nonce use case."""
        return GetLinkNonceUseCase(session_service=session_service)

    # Signup and site use cases
    @provide
    def get_validate_signup_use_case(
        self, event_bus: EventBus, signup_service: SignupService
    ) -> ValidateSignupUseCase:
        """Provide validate signup use case."""
        return ValidateSignupUseCase(event_bus=event_bus, signup_service=signup_service)

    @provide
    def get_remove_member_use_case(
        self,
        site_scope_service: SiteScopeService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> RemoveMemberUseCase:
        """Provide remove member use case."""
        return RemoveMemberUseCase(
            site_scope_service=site_scope_service,
            identity_service=identity_service,
            policy=policy,
        )

    # Network use cases
    @provide
    def get_network_options_use_case(
        self,
        config_service: ConfigService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> GetNetworkOptionsUseCase:
        """Provide get network options use case."""
        return GetNetworkOptionsUseCase(
            config_service=config_service, identity_service=identity_service, policy=policy
        )

    @provide
    def get_update_network_options_use_case(
        self,
        config_service: ConfigService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> UpdateNetworkOptionsUseCase:
        """Provide update network options use case."""
        return UpdateNetworkOptionsUseCase(
            config_service=config_service, identity_service=identity_service, policy=policy
        )

    @provide
    def get_rotate_secret_key_use_case(
        self,
        config_service: ConfigService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> RotateSecretKeyUseCase:
        """Provide rotate secret key use case."""
        return RotateSecretKeyUseCase(
            config_service=config_service, identity_service=identity_service, policy=policy
        )
