"""Unlink account use case."""

from pydantic import BaseModel

from roam.application.usecase.base import ActionResult, BaseUseCase
from roam.domain.error import DomainError
from roam.domain.service import AccountLinker, IdentityService
from roam.domain.value import IdentityId, SiteId


class UnlinkAccountRequest(BaseModel):
    """Unlink request."""

    user_id: IdentityId | None = None
    acting_identity_id: IdentityId
    acting_site_id: SiteId


class UnlinkAccountUseCase(BaseUseCase):
    """Use case for removing the link of a secondary identity."""

    def __init__(
        self, account_linker: AccountLinker, identity_service: IdentityService
    ) -> None:
        self.account_linker = account_linker
        self.identity_service = identity_service

    async def execute(self, request: UnlinkAccountRequest) -> ActionResult:
        """Unlink ``user_id`` on behalf of the acting identity.

        Returns:
            Success, or the failure message
        """
        if request.user_id is None:
            return ActionResult.fail("Invalid user ID.")

        acting = await self.identity_service.find_by_id(request.acting_identity_id)
        if acting is None:
            return ActionResult.fail("Unauthorized.")

        try:
            await self.account_linker.unlink_account(
                request.user_id, acting, request.acting_site_id
            )
        except DomainError as e:
            return ActionResult.fail(str(e))

        return ActionResult.ok("Account unlinked.")
