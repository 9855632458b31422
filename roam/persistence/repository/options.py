"""PostgreSQL implementation of NetworkOptions repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from roam.domain.repository import NetworkOptionsRepository
from roam.domain.value import NetworkOption
from roam.persistence.tables import network_options_table


class PostgresNetworkOptionsRepository(NetworkOptionsRepository):
    """PostgreSQL implementation of NetworkOptionsRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, option: NetworkOption) -> Optional[str]:
        """Get the stored value of an option."""
        stmt = select(network_options_table.c.value).where(
            network_options_table.c.name == option.value
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set(self, option: NetworkOption, value: str) -> None:
        """Store an option value (upsert)."""
        stmt = insert(network_options_table).values(name=option.value, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[network_options_table.c.name],
            set_={"value": stmt.excluded.value},
        )
        await self.session.execute(stmt)
        await self.session.flush()
