"""Get current identity use case."""

from pydantic import BaseModel

from roam.domain.service import IdentityService, NetworkPolicy
from roam.domain.value import IdentityId, SiteId


class GetCurrentIdentityRequest(BaseModel):
    """Get current identity request."""

    identity_id: IdentityId | None = None


class GetCurrentIdentityResponse(BaseModel):
    """Current identity, or ``authenticated: false``."""

    authenticated: bool
    identity_id: str | None = None
    user_login: str | None = None
    user_email: str | None = None
    site_id: SiteId | None = None
    main_id: str | None = None
    roaming: bool = False


class GetCurrentIdentityUseCase:
    """Use case for describing the identity of the current session."""

    def __init__(self, identity_service: IdentityService, policy: NetworkPolicy) -> None:
        self.identity_service = identity_service
        self.policy = policy

    async def execute(self, request: GetCurrentIdentityRequest) -> GetCurrentIdentityResponse:
        if request.identity_id is None:
            return GetCurrentIdentityResponse(authenticated=False)

        identity = await self.identity_service.find_by_id(request.identity_id)
        if identity is None:
            return GetCurrentIdentityResponse(authenticated=False)

        return GetCurrentIdentityResponse(
            authenticated=True,
            identity_id=str(identity.id),
            user_login=identity.user_login,
            user_email=identity.user_email,
            site_id=identity.site_id,
            main_id=str(identity.main_id) if identity.main_id else None,
            roaming=self.policy.is_roaming(identity),
        )
