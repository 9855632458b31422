"""Request session host and roaming session middleware."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from roam.config import Settings
from roam.domain.model.site import Site
from roam.domain.service import SessionHost, SessionService, SiteService
from roam.domain.value import IdentityId
from roam.util.events import EventBus, HostEvent

CookieOp = Callable[[Response], None]


class HttpSessionHost(SessionHost):
    """Session host backed by the current HTTP request.

    Cookie changes are queued and written to the response once the endpoint
    has run; the last change per cookie wins.
    """

    def __init__(
        self, request: Request, session_service: SessionService, settings: Settings
    ) -> None:
        self.request = request
        self.session_service = session_service
        self.settings = settings
        self._identity_id = session_service.get_identity_id_from_token(
            request.cookies.get(settings.auth.session_cookie_name)
        )
        self._cookie_ops: dict[tuple[str, Optional[str]], CookieOp] = {}

    @property
    def host(self) -> str:
        return (self.request.url.hostname or "").lower()

    @property
    def client_ip(self) -> str:
        return self.request.client.host if self.request.client else ""

    def query_param(self, name: str) -> Optional[str]:
        return self.request.query_params.get(name)

    def get_cookie(self, name: str) -> Optional[str]:
        return self.request.cookies.get(name)

    def set_cookie(self, name: str, value: str, *, expires: int, domain: str) -> None:
        self._cookie_ops[(name, domain)] = lambda response: response.set_cookie(
            key=name,
            value=value,
            expires=datetime.fromtimestamp(expires, tz=timezone.utc),
            path="/",
            domain=domain,
            secure=True,
            httponly=True,
            samesite="lax",
        )

    def delete_cookie(self, name: str, *, domain: str) -> None:
        self._cookie_ops[(name, domain)] = lambda response: response.delete_cookie(
            key=name,
            path="/",
            domain=domain,
            secure=True,
            httponly=True,
            samesite="lax",
        )

    @property
    def current_identity_id(self) -> Optional[IdentityId]:
        return self._identity_id

    async def logout(self) -> None:
        self._identity_id = None
        self._cookie_ops[(self.settings.auth.session_cookie_name, None)] = (
            lambda response: response.delete_cookie(
                key=self.settings.auth.session_cookie_name, path="/"
            )
        )

    async def login_as(self, identity_id: IdentityId) -> None:
        self._identity_id = identity_id
        token = self.session_service.create_token(identity_id)
        max_age = self.settings.auth.jwt_expiry_days * 24 * 60 * 60
        self._cookie_ops[(self.settings.auth.session_cookie_name, None)] = (
            lambda response: response.set_cookie(
                key=self.settings.auth.session_cookie_name,
                value=token,
                max_age=max_age,
                path="/",
                secure=self.settings.environment != "development",
                httponly=True,
                samesite="lax",
            )
        )

    def apply(self, response: Response) -> None:
        """Write the queued cookie changes to a response."""
        for op in self._cookie_ops.values():
            op(response)


class RoamingSessionMiddleware(BaseHTTPMiddleware):
    """Resolves the local session and reconciles it with the roaming cookie.

    Must sit inside dishka's container middleware so the request container is
    available on ``request.state``.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        container = request.state.dishka_container
        settings = await container.get(Settings)
        session = HttpSessionHost(request, await container.get(SessionService), settings)

        event_bus = await container.get(EventBus)
        await event_bus.emit(HostEvent.VALIDATE_SESSION, session=session)

        site_service = await container.get(SiteService)
        request.state.session_host = session
        request.state.site = await site_service.find_by_host(session.host)

        response = await call_next(request)
        session.apply(response)
        return response


def get_session_host(request: Request) -> HttpSessionHost:
    """Session host of the current request."""
    return request.state.session_host


def require_site(request: Request) -> Site:
    """Site served on the request host.

    Raises:
        HTTPException: 404 if the host is not a site of the network
    """
    site = getattr(request.state, "site", None)
    if site is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown site")
    return site


def require_identity_id(request: Request) -> IdentityId:
    """Identity of the current session.

    Raises:
        HTTPException: 401 if the request is anonymous
    """
    identity_id = get_session_host(request).current_identity_id
    if identity_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return identity_id
