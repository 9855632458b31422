"""PostgreSQL implementation of Signup repository."""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roam.domain.model import PendingSignup
from roam.domain.repository import SignupRepository
from roam.domain.value import SiteId
from roam.persistence.mappers import row_to_signup, signup_to_dict
from roam.persistence.tables import signups_table


class PostgresSignupRepository(SignupRepository):
    """PostgreSQL implementation of SignupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_login(self, site_id: SiteId, login: str) -> Optional[PendingSignup]:
        """Find a pending signup reserving a login on a site."""
        stmt = (
            select(signups_table)
            .where(signups_table.c.site_id == site_id)
            .where(signups_table.c.user_login == login)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_signup(dict(row)) if row else None

    async def find_by_email(self, site_id: SiteId, email: str) -> Optional[PendingSignup]:
        """Find a pending signup reserving an email on a site."""
        stmt = (
            select(signups_table)
            .where(signups_table.c.site_id == site_id)
            .where(func.lower(signups_table.c.user_email) == email.lower())
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_signup(dict(row)) if row else None

    async def delete(self, signup: PendingSignup) -> None:
        """Delete a pending signup."""
        stmt = (
            delete(signups_table)
            .where(signups_table.c.site_id == signup.site_id)
            .where(signups_table.c.user_login == signup.user_login)
            .where(signups_table.c.activation_key == signup.activation_key)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def save(self, signup: PendingSignup) -> PendingSignup:
        """Save a pending signup."""
        await self.session.execute(signups_table.insert().values(**signup_to_dict(signup)))
        await self.session.flush()
        return signup
