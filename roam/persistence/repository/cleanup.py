"""PostgreSQL implementation of PendingCleanup repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from roam.domain.repository import PendingCleanupRepository
from roam.domain.value import IdentityId, SiteId
from roam.persistence.tables import pending_cleanup_table


class PostgresPendingCleanupRepository(PendingCleanupRepository):
    """PostgreSQL implementation of PendingCleanupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def mark(self, site_id: SiteId, identity_id: IdentityId) -> None:
        """Mark an identity as pending removal from a site."""
        stmt = (
            insert(pending_cleanup_table)
            .values(site_id=site_id, identity_id=identity_id)
            .on_conflict_do_nothing()
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def pending_for_site(self, site_id: SiteId) -> list[IdentityId]:
        """List identities marked for a site."""
        stmt = (
            select(pending_cleanup_table.c.identity_id)
            .where(pending_cleanup_table.c.site_id == site_id)
            .order_by(pending_cleanup_table.c.marked_at)
        )
        result = await self.session.execute(stmt)
        return [
            IdentityId(UUID(value) if isinstance(value, str) else value)
            for value in result.scalars().all()
        ]
