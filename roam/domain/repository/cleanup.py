"""Pending cleanup collaborator interface.

Identities removed from a site are handed to a background job that deletes
them once they no longer belong to any site. Only the marking side lives here.
"""

from abc import ABC, abstractmethod

from roam.domain.value import IdentityId, SiteId


class PendingCleanupRepository(ABC):
    """Queue of identities pending removal, grouped by site."""

    @abstractmethod
    async def mark(self, site_id: SiteId, identity_id: IdentityId) -> None:
        """Mark an identity as pending removal from a site (idempotent)."""
        pass

    @abstractmethod
    async def pending_for_site(self, site_id: SiteId) -> list[IdentityId]:
        """List identities marked for a site."""
        pass
