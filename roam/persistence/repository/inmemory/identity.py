"""In-memory identity repository for testing."""

from typing import Optional

from roam.domain.model.identity import Identity
from roam.domain.repository.identity import IdentityRepository
from roam.domain.value import IdentityId, SiteId


class InMemoryIdentityRepository(IdentityRepository):
    """In-memory implementation of IdentityRepository for testing."""

    def __init__(self) -> None:
        self._identities: dict[IdentityId, Identity] = {}

    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find an identity by ID."""
        return self._identities.get(identity_id)

    async def find_by_login(self, site_id: SiteId, login: str) -> Optional[Identity]:
        """Find an identity by login name within a site."""
        for identity in self._identities.values():
            if identity.site_id == site_id and identity.user_login == login:
                return identity
        return None

    async def find_by_email(self, site_id: SiteId, email: str) -> Optional[Identity]:
        """Find an identity by email within a site."""
        for identity in self._identities.values():
            if identity.site_id == site_id and identity.user_email.lower() == email.lower():
                return identity
        return None

    async def find_linked(
        self, main_id: IdentityId, exclude_site_id: SiteId
    ) -> list[Identity]:
        """Find all identities linked to a primary identity, outside one site."""
        linked = [
            identity
            for identity in self._identities.values()
            if identity.main_id == main_id and identity.site_id != exclude_site_id
        ]
        return sorted(linked, key=lambda i: (i.site_id, i.user_login))

    async def save(self, identity: Identity) -> Identity:
        """Save or update an identity."""
        self._identities[identity.id] = identity
        return identity
