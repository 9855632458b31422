"""Get linked account token use case."""

import logfire
from pydantic import BaseModel

from roam.application.usecase.base import ActionResult, BaseUseCase
from roam.domain.error import DomainError, UnauthorizedError
from roam.domain.service import AccountLinker, IdentityService, NetworkPolicy
from roam.domain.value import IdentityId, SiteId


class GetLinkedAccountTokenRequest(BaseModel):
    """Request for a remote-login URL into a linked account."""

    user_id: IdentityId | None = None
    site_id: SiteId | None = None
    acting_identity_id: IdentityId
    acting_site_id: SiteId
    client_ip: str


class GetLinkedAccountTokenUseCase(BaseUseCase):
    """Use case for minting a remote-login URL for a linked identity.

    Only the identity's primary (or a network administrator on the root site)
    may mint one, and only for the site the identity belongs to.
    """

    def __init__(
        self,
        account_linker: AccountLinker,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> None:
        """Initialize get linked account token use case.

        Args:
            account_linker: Account linking domain service
            identity_service: Identity domain service
            policy: Network policy
        """
        self.account_linker = account_linker
        self.identity_service = identity_service
        self.policy = policy

    async def execute(self, request: GetLinkedAccountTokenRequest) -> ActionResult:
        """Build the login URL.

        Returns:
            ``{login_url}`` on success, the failure message otherwise
        """
        if request.user_id is None or request.site_id is None:
            return ActionResult.fail("Missing parameters.")

        try:
            await self._authorize(request)
            url = await self.account_linker.generate_login_url(
                request.user_id, request.site_id, request.client_ip
            )
        except DomainError as e:
            return ActionResult.fail(str(e))

        logfire.info(
            "Remote login URL issued",
            identity_id=str(request.user_id),
            site_id=request.site_id,
        )
        return ActionResult.ok({"login_url": url})

    async def _authorize(self, request: GetLinkedAccountTokenRequest) -> None:
        acting = await self.identity_service.find_by_id(request.acting_identity_id)
        target = await self.identity_service.find_by_id(request.user_id)
        if acting is None or target is None or target.site_id != request.site_id:
            raise UnauthorizedError()

        if target.main_id != acting.id and not self.policy.can_manage_network_users(
            acting, request.acting_site_id
        ):
            raise UnauthorizedError()
