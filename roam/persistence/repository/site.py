"""PostgreSQL implementation of Site repository."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roam.domain.model import Site
from roam.domain.repository import SiteRepository
from roam.domain.value import SiteId
from roam.persistence.mappers import row_to_site, site_to_dict
from roam.persistence.tables import sites_table


class PostgresSiteRepository(SiteRepository):
    """PostgreSQL implementation of SiteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, site_id: SiteId) -> Optional[Site]:
        """Find a site by ID."""
        stmt = select(sites_table).where(sites_table.c.id == site_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_site(dict(row)) if row else None

    async def find_by_domain(self, domain: str, path: str = "/") -> Optional[Site]:
        """Find a site by its domain and path."""
        stmt = (
            select(sites_table)
            .where(func.lower(sites_table.c.domain) == domain.lower())
            .where(sites_table.c.path == path)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_site(dict(row)) if row else None

    async def save(self, site: Site) -> Site:
        """Save a site (create or update)."""
        existing = await self.find_by_id(site.id)

        site_dict = site_to_dict(site)

        if existing:
            stmt = sites_table.update().where(sites_table.c.id == site.id).values(**site_dict)
        else:
            stmt = sites_table.insert().values(**site_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return site
