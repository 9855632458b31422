"""Site scoping of identity lifecycle operations."""

import logfire

from roam.domain.error import SiteScopeError
from roam.domain.repository import IdentityRepository, PendingCleanupRepository
from roam.domain.value import IdentityId, SiteId

from .base import Service


class SiteScopeService(Service):
    """Keeps deletion and removal of identities inside their own site."""

    def __init__(
        self,
        identity_repository: IdentityRepository,
        cleanup_repository: PendingCleanupRepository,
    ) -> None:
        self.identity_repository = identity_repository
        self.cleanup_repository = cleanup_repository

    async def ensure_deletable(self, identity_id: IdentityId, site_id: SiteId) -> None:
        """Block deleting an identity from outside its own site.

        Raises:
            SiteScopeError: If the identity belongs to another site
        """
        identity = await self.identity_repository.find_by_id(identity_id)
        if identity is None:
            return
        if identity.site_id != site_id:
            logfire.warn(
                "Cross-site deletion blocked",
                identity_id=str(identity_id),
                site_id=site_id,
            )
            raise SiteScopeError("Cannot delete user outside your site scope.")

    async def check_removal(
        self, identity_id: IdentityId, site_id: SiteId, *, network_admin: bool = False
    ) -> None:
        """Block removing an identity from a site it is not scoped to.

        Args:
            identity_id: Identity being removed
            site_id: Site it is removed from
            network_admin: Whether the removal comes from a network administrator

        Raises:
            SiteScopeError: If the identity belongs to another site
        """
        if network_admin:
            return

        identity = await self.identity_repository.find_by_id(identity_id)
        if identity is not None and identity.site_id != site_id:
            logfire.warn(
                "Unscoped removal blocked",
                identity_id=str(identity_id),
                site_id=site_id,
            )
            raise SiteScopeError("Unauthorized removal: User is not scoped to this site.")

    async def mark_for_cleanup(self, identity_id: IdentityId, site_id: SiteId) -> None:
        """Hand a removed identity to the deferred cleanup job."""
        await self.cleanup_repository.mark(site_id, identity_id)
        logfire.info(
            "Identity marked for cleanup", identity_id=str(identity_id), site_id=site_id
        )
