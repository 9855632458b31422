"""Get link nonce use case."""

from pydantic import BaseModel

from roam.domain.service import SessionService
from roam.domain.value import IdentityId

from .link_account import LINK_ACCOUNT_ACTION


class GetLinkNonceResponse(BaseModel):
    """Nonce to submit with the link form."""

    nonce: str


class GetLinkNonceUseCase:
    """Use case for issuing the link form nonce of the current identity."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, identity_id: IdentityId) -> GetLinkNonceResponse:
        return GetLinkNonceResponse(
            nonce=self.session_service.create_nonce(LINK_ACCOUNT_ACTION, identity_id)
        )
