"""Remote login use case."""

from pydantic import BaseModel

from roam.domain.service import AccountLinker, SessionHost, SiteService
from roam.domain.value import RemoteLoginError


class RemoteLoginRequest(BaseModel):
    """Remote login request carrying a token from another site."""

    token: str
    client_ip: str
    host: str


class RemoteLoginResponse(BaseModel):
    """Where to send the browser next."""

    redirect_url: str
    identity_id: str | None = None
    error: RemoteLoginError | None = None


class RemoteLoginUseCase:
    """Use case for entering a site through a remote-login token."""

    def __init__(self, account_linker: AccountLinker, site_service: SiteService) -> None:
        """Initialize remote login use case.

        Args:
            account_linker: Account linking domain service
            site_service: Site domain service
        """
        self.account_linker = account_linker
        self.site_service = site_service

    async def execute(
        self, request: RemoteLoginRequest, session: SessionHost
    ) -> RemoteLoginResponse:
        """Execute remote login.

        Failures never raise; they come back as a redirect carrying only the
        coarse error code.

        Args:
            request: Token, client address and request host
            session: Current request's session host

        Returns:
            Redirect target and outcome
        """
        site = await self.site_service.find_by_host(request.host)
        outcome = await self.account_linker.remote_login(
            request.token, request.client_ip, site, session
        )
        return RemoteLoginResponse(
            redirect_url=outcome.redirect_url,
            identity_id=str(outcome.identity_id) if outcome.identity_id else None,
            error=outcome.error,
        )
