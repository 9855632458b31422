"""Site domain service."""

from typing import Optional

from roam.domain.model.site import Site
from roam.domain.repository import SiteRepository

from .base import Service


class SiteService(Service):
    """Resolves tenant sites."""

    def __init__(self, site_repository: SiteRepository) -> None:
        self.site_repository = site_repository

    async def find_by_host(self, host: str) -> Optional[Site]:
        """Find the site served on a request host (port ignored)."""
        return await self.site_repository.find_by_domain(host.split(":")[0].lower(), "/")
