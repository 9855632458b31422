"""Remove site member use case."""

from pydantic import BaseModel

from roam.domain.error import UnauthorizedError
from roam.domain.service import IdentityService, NetworkPolicy, SiteScopeService
from roam.domain.value import IdentityId, SiteId


class RemoveMemberRequest(BaseModel):
    """Request to remove an identity from a site."""

    site_id: SiteId
    identity_id: IdentityId
    acting_identity_id: IdentityId
    acting_site_id: SiteId


class RemoveMemberUseCase:
    """Use case for removing an identity from a site.

    The removed identity is queued for deferred cleanup.
    """

    def __init__(
        self,
        site_scope_service: SiteScopeService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> None:
        """Initialize remove member use case.

        Args:
            site_scope_service: Site scoping domain service
            identity_service: Identity domain service
            policy: Network policy
        """
        self.site_scope_service = site_scope_service
        self.identity_service = identity_service
        self.policy = policy

    async def execute(self, request: RemoveMemberRequest) -> None:
        """Remove the member.

        Raises:
            UnauthorizedError: If the acting identity manages neither the site nor the network
            SiteScopeError: If the identity is not scoped to the site
            NotFoundError: If the identity does not exist
        """
        acting = await self.identity_service.get_by_id(request.acting_identity_id)
        network_admin = self.policy.can_manage_network_users(acting, request.acting_site_id)
        if not network_admin and acting.site_id != request.site_id:
            raise UnauthorizedError()

        await self.identity_service.get_by_id(request.identity_id)
        await self.site_scope_service.check_removal(
            request.identity_id, request.site_id, network_admin=network_admin
        )
        await self.site_scope_service.mark_for_cleanup(request.identity_id, request.site_id)
