"""Site repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from roam.domain.model.site import Site
from roam.domain.value import SiteId


class SiteRepository(ABC):
    """Repository for tenant sites."""

    @abstractmethod
    async def find_by_id(self, site_id: SiteId) -> Optional[Site]:
        """Find a site by ID."""
        pass

    @abstractmethod
    async def find_by_domain(self, domain: str, path: str = "/") -> Optional[Site]:
        """Find a site by its domain and path.

        Args:
            domain: Host name, compared case-insensitively
            path: Site path on that host

        Returns:
            The site if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, site: Site) -> Site:
        """Save a site (create or update)."""
        pass
