"""PostgreSQL implementation of Identity repository."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roam.domain.model import Identity
from roam.domain.repository import IdentityRepository
from roam.domain.value import IdentityId, SiteId
from roam.persistence.mappers import identity_to_dict, row_to_identity
from roam.persistence.tables import identities_table


class PostgresIdentityRepository(IdentityRepository):
    """PostgreSQL implementation of IdentityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _first(self, stmt) -> Optional[Identity]:
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_identity(dict(row)) if row else None

    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find an identity by ID."""
        stmt = select(identities_table).where(identities_table.c.id == identity_id)
        return await self._first(stmt)

    async def find_by_login(self, site_id: SiteId, login: str) -> Optional[Identity]:
        """Find an identity by login name within a site."""
        stmt = (
            select(identities_table)
            .where(identities_table.c.site_id == site_id)
            .where(identities_table.c.user_login == login)
        )
        return await self._first(stmt)

    async def find_by_email(self, site_id: SiteId, email: str) -> Optional[Identity]:
        """Find an identity by email within a site (case-insensitive)."""
        stmt = (
            select(identities_table)
            .where(identities_table.c.site_id == site_id)
            .where(func.lower(identities_table.c.user_email) == email.lower())
        )
        return await self._first(stmt)

    async def find_linked(
        self, main_id: IdentityId, exclude_site_id: SiteId
    ) -> list[Identity]:
        """Find all identities linked to a primary identity, outside one site."""
        stmt = (
            select(identities_table)
            .where(identities_table.c.main_id == main_id)
            .where(identities_table.c.site_id != exclude_site_id)
            .order_by(identities_table.c.site_id, identities_table.c.user_login)
        )
        result = await self.session.execute(stmt)
        return [row_to_identity(dict(row)) for row in result.mappings().all()]

    async def save(self, identity: Identity) -> Identity:
        """Save an identity (create or update)."""
        existing = await self.find_by_id(identity.id)

        identity_dict = identity_to_dict(identity)

        if existing:
            stmt = (
                identities_table.update()
                .where(identities_table.c.id == identity.id)
                .values(**identity_dict)
            )
        else:
            stmt = identities_table.insert().values(**identity_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return identity
