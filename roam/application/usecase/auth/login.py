"""Local login use case."""

import logfire
from pydantic import BaseModel

from roam.domain.service import IdentityService, SessionHost
from roam.domain.value import SiteId
from roam.util.events import EventBus, HostEvent


class LoginRequest(BaseModel):
    """Login form submission on a site."""

    site_id: SiteId
    username: str  # Login name or email
    password: str


class LoginResponse(BaseModel):
    """Login response."""

    identity_id: str
    user_login: str
    site_id: SiteId


class LoginUseCase:
    """Use case for logging in with site credentials."""

    def __init__(self, identity_service: IdentityService, event_bus: EventBus) -> None:
        """Initialize login use case.

        Args:
            identity_service: Identity domain service
            event_bus: Host event bus (login handlers)
        """
        self.identity_service = identity_service
        self.event_bus = event_bus

    async def execute(self, request: LoginRequest, session: SessionHost) -> LoginResponse:
        """Execute login flow.

        Steps:
        1. Verify credentials on the site (roaming identities may use the root site's)
        2. Establish the local session
        3. Fire the login event (issues the roaming cookie for roaming identities)

        Args:
            request: Login request
            session: Current request's session host

        Returns:
            Logged-in identity

        Raises:
            AuthFailedError: If the credentials are not valid on the site
        """
        identity = await self.identity_service.authenticate(
            request.site_id, request.username, request.password
        )

        with logfire.span("login_identity", identity_id=str(identity.id), site_id=request.site_id):
            await session.login_as(identity.id)
            await self.event_bus.emit(HostEvent.LOGIN, session=session, identity=identity)

            logfire.info("Identity logged in", identity_id=str(identity.id))

        return LoginResponse(
            identity_id=str(identity.id),
            user_login=identity.user_login,
            site_id=identity.site_id,
        )
