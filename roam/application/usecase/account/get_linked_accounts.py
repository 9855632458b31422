"""Get linked accounts use case."""

from pydantic import BaseModel

from roam.domain.service import AccountLinker
from roam.domain.value import IdentityId, LinkedAccount


class GetLinkedAccountsRequest(BaseModel):
    """Get linked accounts request."""

    main_id: IdentityId


class GetLinkedAccountsResponse(BaseModel):
    """Linked accounts of a primary identity."""

    accounts: list[LinkedAccount]


class GetLinkedAccountsUseCase:
    """Use case for listing the accounts linked to the current identity."""

    def __init__(self, account_linker: AccountLinker) -> None:
        self.account_linker = account_linker

    async def execute(self, request: GetLinkedAccountsRequest) -> GetLinkedAccountsResponse:
        accounts = await self.account_linker.get_linked_accounts(request.main_id)
        return GetLinkedAccountsResponse(accounts=accounts)
