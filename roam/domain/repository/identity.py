"""Identity repository interface (the host's identity store)."""

from abc import ABC, abstractmethod
from typing import Optional

from roam.domain.model.identity import Identity
from roam.domain.value import IdentityId, SiteId


class IdentityRepository(ABC):
    """Repository for site-scoped identities.

    Lookups by login and email are always scoped to one site; the same login
    may exist independently on every tenant.
    """

    @abstractmethod
    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find an identity by ID.

        Args:
            identity_id: The identity's unique identifier

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_login(self, site_id: SiteId, login: str) -> Optional[Identity]:
        """Find an identity by login name within a site.

        Args:
            site_id: Site the identity belongs to
            login: Login name

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, site_id: SiteId, email: str) -> Optional[Identity]:
        """Find an identity by email within a site.

        Args:
            site_id: Site the identity belongs to
            email: Email address

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_linked(
        self, main_id: IdentityId, exclude_site_id: SiteId
    ) -> list[Identity]:
        """Find all identities linked to a primary identity.

        Args:
            main_id: Primary identity ID
            exclude_site_id: Site to leave out (the root site)

        Returns:
            Linked identities (may be empty)
        """
        pass

    @abstractmethod
    async def save(self, identity: Identity) -> Identity:
        """Save an identity (create or update).

        Args:
            identity: The identity to save

        Returns:
            The saved identity
        """
        pass
