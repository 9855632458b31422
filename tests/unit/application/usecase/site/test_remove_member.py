"""Unit tests for RemoveMemberUseCase."""

from uuid import uuid4

import pytest

from roam.application.usecase.site import RemoveMemberUseCase
from roam.application.usecase.site.remove_member import RemoveMemberRequest
from roam.domain.error import NotFoundError, SiteScopeError, UnauthorizedError
from roam.domain.repository import PendingCleanupRepository
from roam.domain.value import IdentityId, SiteId
from tests.factories import make_identity, seed_identity
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestRemoveMemberUseCase:
    """Tests for RemoveMemberUseCase."""

    @pytest.mark.asyncio
    async def test_site_member_removal_is_queued(self, unit_env):
        # Arrange
        use_case = await unit_env.get(RemoveMemberUseCase)
        cleanup = await unit_env.get(PendingCleanupRepository)
        owner = await seed_identity(unit_env, make_identity(2, "owner"))
        alice = await seed_identity(unit_env, make_identity(2, "alice"))

        # Act
        await use_case.execute(
            RemoveMemberRequest(
                site_id=SiteId(2),
                identity_id=alice.id,
                acting_identity_id=owner.id,
                acting_site_id=SiteId(2),
            )
        )

        # Assert
        assert await cleanup.pending_for_site(SiteId(2)) == [alice.id]

    @pytest.mark.asyncio
    async def test_removal_from_foreign_site_is_unauthorized(self, unit_env):
        # Arrange
        use_case = await unit_env.get(RemoveMemberUseCase)
        owner = await seed_identity(unit_env, make_identity(2, "owner"))
        bob = await seed_identity(unit_env, make_identity(3, "bob"))

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await use_case.execute(
                RemoveMemberRequest(
                    site_id=SiteId(3),
                    identity_id=bob.id,
                    acting_identity_id=owner.id,
                    acting_site_id=SiteId(2),
                )
            )

    @pytest.mark.asyncio
    async def test_unscoped_identity_is_blocked(self, unit_env):
        # Arrange
        use_case = await unit_env.get(RemoveMemberUseCase)
        owner = await seed_identity(unit_env, make_identity(2, "owner"))
        bob = await seed_identity(unit_env, make_identity(3, "bob"))

        # Act & Assert
        with pytest.raises(SiteScopeError):
            await use_case.execute(
                RemoveMemberRequest(
                    site_id=SiteId(2),
                    identity_id=bob.id,
                    acting_identity_id=owner.id,
                    acting_site_id=SiteId(2),
                )
            )

    @pytest.mark.asyncio
    async def test_network_admin_removes_anywhere(self, unit_env):
        # Arrange
        use_case = await unit_env.get(RemoveMemberUseCase)
        cleanup = await unit_env.get(PendingCleanupRepository)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        bob = await seed_identity(unit_env, make_identity(3, "bob"))

        # Act
        await use_case.execute(
            RemoveMemberRequest(
                site_id=SiteId(2),
                identity_id=bob.id,
                acting_identity_id=admin.id,
                acting_site_id=SiteId(1),
            )
        )

        # Assert
        assert await cleanup.pending_for_site(SiteId(2)) == [bob.id]

    @pytest.mark.asyncio
    async def test_unknown_identity(self, unit_env):
        # Arrange
        use_case = await unit_env.get(RemoveMemberUseCase)
        owner = await seed_identity(unit_env, make_identity(2, "owner"))

        # Act & Assert
        with pytest.raises(NotFoundError):
            await use_case.execute(
                RemoveMemberRequest(
                    site_id=SiteId(2),
                    identity_id=IdentityId(uuid4()),
                    acting_identity_id=owner.id,
                    acting_site_id=SiteId(2),
                )
            )
