"""Rotate secret key use case."""

from pydantic import BaseModel

from roam.domain.service import ConfigService, IdentityService, NetworkPolicy
from roam.domain.value import IdentityId, SiteId

from .common import require_network_admin


class RotateSecretKeyRequest(BaseModel):
    """Rotate secret key request."""

    acting_identity_id: IdentityId
    acting_site_id: SiteId


class RotateSecretKeyUseCase:
    """Use case for replacing the network signing secret.

    Every outstanding roaming cookie and remote-login token stops validating.
    """

    def __init__(
        self,
        config_service: ConfigService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> None:
        self.config_service = config_service
        self.identity_service = identity_service
        self.policy = policy

    async def execute(self, request: RotateSecretKeyRequest) -> None:
        await require_network_admin(
            self.identity_service,
            self.policy,
            request.acting_identity_id,
            request.acting_site_id,
        )
        await self.config_service.rotate_secret_key()
