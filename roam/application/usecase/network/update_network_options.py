"""Update network options use case."""

from pydantic import BaseModel

from roam.domain.service import ConfigService, IdentityService, NetworkPolicy
from roam.domain.value import IdentityId, NetworkOption, SiteId

from .common import NetworkOptionsResponse, require_network_admin


class UpdateNetworkOptionsRequest(BaseModel):
    """Partial update of the numeric network options."""

    acting_identity_id: IdentityId
    acting_site_id: SiteId
    cache_expiry: int | None = None
    roaming_cookie_expiry: int | None = None
    remote_login_token_expiry: int | None = None
    rate_limit_max: int | None = None
    rate_limit_wait: int | None = None


class UpdateNetworkOptionsUseCase:
    """Use case for changing the network options."""

    def __init__(
        self,
        config_service: ConfigService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> None:
        self.config_service = config_service
        self.identity_service = identity_service
        self.policy = policy

    async def execute(self, request: UpdateNetworkOptionsRequest) -> NetworkOptionsResponse:
        """Validate and store the given options.

        Raises:
            UnauthorizedError: If the caller is not a network administrator on the root site
            ValidationError: If any value is out of range (nothing is stored)
        """
        await require_network_admin(
            self.identity_service,
            self.policy,
            request.acting_identity_id,
            request.acting_site_id,
        )

        values = {
            option: getattr(request, option.value)
            for option in NetworkOption
            if option.bounds is not None and getattr(request, option.value) is not None
        }
        await self.config_service.update_options(values)

        options = await self.config_service.get_options()
        return NetworkOptionsResponse(
            **{option.value: value for option, value in options.items()},
            uses_default_secret=await self.config_service.uses_default_secret(),
        )
