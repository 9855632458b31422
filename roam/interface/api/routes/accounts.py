"""Account linking routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request
from pydantic import BaseModel

from roam.application.usecase.account import (
    GetLinkedAccountTokenUseCase,
    GetLinkedAccountsUseCase,
    GetLinkNonceUseCase,
    LinkAccountUseCase,
    UnlinkAccountUseCase,
)
from roam.application.usecase.account.get_link_nonce import GetLinkNonceResponse
from roam.application.usecase.account.get_linked_account_token import (
    GetLinkedAccountTokenRequest,
)
from roam.application.usecase.account.get_linked_accounts import (
    GetLinkedAccountsRequest,
    GetLinkedAccountsResponse,
)
from roam.application.usecase.account.link_account import LinkAccountRequest
from roam.application.usecase.account.unlink_account import UnlinkAccountRequest
from roam.application.usecase.base import ActionResult
from roam.domain.value import IdentityId, SiteId
from roam.interface.api.middleware import (
    get_session_host,
    require_identity_id,
    require_site,
)

router = APIRouter(prefix="/accounts", tags=["accounts"], route_class=DishkaRoute)


class LinkAccountAPIRequest(BaseModel):
    """Link form submission."""

    nonce: str = ""
    site_url: str = ""
    username: str = ""
    password: str = ""
    main_user_id: IdentityId | None = None


class UnlinkAccountAPIRequest(BaseModel):
    """Unlink request."""

    user_id: IdentityId | None = None


class LinkedAccountTokenAPIRequest(BaseModel):
    """Remote-login URL request."""

    user_id: IdentityId | None = None
    site_id: SiteId | None = None


@router.post("/link", response_model=ActionResult)
async def link_account(
    body: LinkAccountAPIRequest,
    request: Request,
    link_account_use_case: FromDishka[LinkAccountUseCase],
) -> ActionResult:
    """Link an identity on another site to a primary identity.

    Example:
        POST /accounts/link
        {"nonce": "...", "site_url": "https://site2.example.com",
         "username": "alice", "password": "...", "main_user_id": "..."}

        Response:
        {"success": true, "data": {"message": "Account linked successfully.",
                                   "account": {"site_id": 2, ...}}}
    """
    identity_id = require_identity_id(request)
    site = require_site(request)
    return await link_account_use_case.execute(
        LinkAccountRequest(
            **body.model_dump(),
            acting_identity_id=identity_id,
            acting_site_id=site.id,
        )
    )


@router.post("/unlink", response_model=ActionResult)
async def unlink_account(
    body: UnlinkAccountAPIRequest,
    request: Request,
    unlink_account_use_case: FromDishka[UnlinkAccountUseCase],
) -> ActionResult:
    """Remove the link of an identity."""
    identity_id = require_identity_id(request)
    site = require_site(request)
    return await unlink_account_use_case.execute(
        UnlinkAccountRequest(
            user_id=body.user_id, acting_identity_id=identity_id, acting_site_id=site.id
        )
    )


@router.post("/token", response_model=ActionResult)
async def get_linked_account_token(
    body: LinkedAccountTokenAPIRequest,
    request: Request,
    get_token_use_case: FromDishka[GetLinkedAccountTokenUseCase],
) -> ActionResult:
    """Mint a remote-login URL into a linked account.

    Response:
        {"success": true, "data": {"login_url": "https://site2.example.com/login?..."}}
    """
    identity_id = require_identity_id(request)
    site = require_site(request)
    return await get_token_use_case.execute(
        GetLinkedAccountTokenRequest(
            user_id=body.user_id,
            site_id=body.site_id,
            acting_identity_id=identity_id,
            acting_site_id=site.id,
            client_ip=get_session_host(request).client_ip,
        )
    )


@router.get("/linked", response_model=GetLinkedAccountsResponse)
async def get_linked_accounts(
    request: Request,
    get_linked_accounts_use_case: FromDishka[GetLinkedAccountsUseCase],
) -> GetLinkedAccountsResponse:
    """Accounts linked to the current identity."""
    identity_id = require_identity_id(request)
    return await get_linked_accounts_use_case.execute(
        GetLinkedAccountsRequest(main_id=identity_id)
    )


@router.get("/nonce", response_model=GetLinkNonceResponse)
async def get_link_nonce(
    request: Request,
    get_link_nonce_use_case: FromDishka[GetLinkNonceUseCase],
) -> GetLinkNonceResponse:
    """Nonce to submit with the link form."""
    return await get_link_nonce_use_case.execute(require_identity_id(request))
