"""Get network options use case."""

from pydantic import BaseModel

from roam.domain.service import ConfigService, IdentityService, NetworkPolicy
from roam.domain.value import IdentityId, SiteId

from .common import NetworkOptionsResponse, require_network_admin


class GetNetworkOptionsRequest(BaseModel):
    """Get network options request."""

    acting_identity_id: IdentityId
    acting_site_id: SiteId


class GetNetworkOptionsUseCase:
    """Use case for reading the network options."""

    def __init__(
        self,
        config_service: ConfigService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> None:
        self.config_service = config_service
        self.identity_service = identity_service
        self.policy = policy

    async def execute(self, request: GetNetworkOptionsRequest) -> NetworkOptionsResponse:
        """Read every option.

        Raises:
            UnauthorizedError: If the caller is not a network administrator on the root site
        """
        await require_network_admin(
            self.identity_service,
            self.policy,
            request.acting_identity_id,
            request.acting_site_id,
        )

        options = await self.config_service.get_options()
        return NetworkOptionsResponse(
            **{option.value: value for option, value in options.items()},
            uses_default_secret=await self.config_service.uses_default_secret(),
        )
