"""In-memory site repository for testing."""

from typing import Optional

from roam.domain.model.site import Site
from roam.domain.repository.site import SiteRepository
from roam.domain.value import SiteId


class InMemorySiteRepository(SiteRepository):
    """In-memory implementation of SiteRepository for testing."""

    def __init__(self) -> None:
        self._sites: dict[SiteId, Site] = {}

    async def find_by_id(self, site_id: SiteId) -> Optional[Site]:
        return self._sites.get(site_id)

    async def find_by_domain(self, domain: str, path: str = "/") -> Optional[Site]:
        for site in self._sites.values():
            if site.domain.lower() == domain.lower() and site.path == path:
                return site
        return None

    async def save(self, site: Site) -> Site:
        self._sites[site.id] = site
        return site
