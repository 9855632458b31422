"""Link account use case."""

import logfire
from pydantic import BaseModel

from roam.application.usecase.base import ActionResult, BaseUseCase
from roam.domain.error import DomainError
from roam.domain.service import (
    AccountLinker,
    IdentityService,
    NetworkPolicy,
    SessionService,
)
from roam.domain.value import IdentityId, SiteId

# Nonce action bound to the link form
LINK_ACCOUNT_ACTION = "link_account"


class LinkAccountRequest(BaseModel):
    """Link form submission."""

    nonce: str
    site_url: str
    username: str
    password: str
    main_user_id: IdentityId | None = None
    acting_identity_id: IdentityId
    acting_site_id: SiteId


class LinkAccountUseCase(BaseUseCase):
    """Use case for linking another site's identity to a primary identity."""

    def __init__(
        self,
        account_linker: AccountLinker,
        session_service: SessionService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
    ) -> None:
        """Initialize link account use case.

        Args:
            account_linker: Account linking domain service
            session_service: Session domain service (form nonces)
            identity_service: Identity domain service
            policy: Network policy
        """
        self.account_linker = account_linker
        self.session_service = session_service
        self.identity_service = identity_service
        self.policy = policy

    async def execute(self, request: LinkAccountRequest) -> ActionResult:
        """Execute account linking.

        Steps:
        1. Check the form nonce against the caller's session
        2. Reject incomplete submissions
        3. Allow linking to the caller's own primary only, unless network admin
        4. Link and return the linked account

        Args:
            request: Link request

        Returns:
            ``{message, account}`` on success, the failure message otherwise
        """
        if not self.session_service.verify_nonce(
            request.nonce, LINK_ACCOUNT_ACTION, request.acting_identity_id
        ):
            logfire.warn(
                "Link account nonce rejected",
                acting_identity_id=str(request.acting_identity_id),
            )
            return ActionResult.fail("Security check failed.")

        if (
            request.main_user_id is None
            or not request.site_url.strip()
            or not request.username.strip()
            or not request.password
        ):
            return ActionResult.fail("Missing required data.")

        if request.main_user_id != request.acting_identity_id:
            acting = await self.identity_service.find_by_id(request.acting_identity_id)
            if acting is None or not self.policy.can_manage_network_users(
                acting, request.acting_site_id
            ):
                return ActionResult.fail("Permission denied.")

        try:
            account = await self.account_linker.link_account(
                request.main_user_id,
                request.site_url.strip(),
                request.username.strip(),
                request.password,
            )
        except DomainError as e:
            return ActionResult.fail(str(e))

        return ActionResult.ok(
            {
                "message": "Account linked successfully.",
                "account": account.model_dump(mode="json"),
            }
        )
