"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from roam.config import Settings
from roam.domain.repository import (
    IdentityRepository,
    NetworkOptionsRepository,
    PendingCleanupRepository,
    SignupRepository,
    SiteRepository,
)
from roam.persistence.database import create_engine, create_session_factory
from roam.persistence.repository import (
    PostgresIdentityRepository,
    PostgresNetworkOptionsRepository,
    PostgresPendingCleanupRepository,
    PostgresSignupRepository,
    PostgresSiteRepository,
)
from roam.util.di.base import ProviderBase
from roam.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the app shuts down."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is committed at the end of the request if no exception
        occurred, or rolled back if one was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_identity_repository(self, session: AsyncSession) -> IdentityRepository:
        """Provide Identity repository."""
        return PostgresIdentityRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_site_repository(self, session: AsyncSession) -> SiteRepository:
        """Provide Site repository."""
        return PostgresSiteRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_signup_repository(self, session: AsyncSession) -> SignupRepository:
        """Provide Signup repository."""
        return PostgresSignupRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_network_options_repository(
        self, session: AsyncSession
    ) -> NetworkOptionsRepository:
        """Provide NetworkOptions repository."""
        return PostgresNetworkOptionsRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_pending_cleanup_repository(
        self, session: AsyncSession
    ) -> PendingCleanupRepository:
        """Provide PendingCleanup repository."""
        return PostgresPendingCleanupRepository(session)
