"""Authentication routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from roam.application.usecase.auth import (
    GetCurrentIdentityUseCase,
    LoginUseCase,
    LogoutUseCase,
    RemoteLoginUseCase,
)
from roam.application.usecase.auth.get_current_identity import (
    GetCurrentIdentityRequest,
    GetCurrentIdentityResponse,
)
from roam.application.usecase.auth.login import LoginRequest, LoginResponse
from roam.application.usecase.auth.remote_login import RemoteLoginRequest
from roam.domain.error import AuthFailedError
from roam.domain.service import RoamingSessionManager
from roam.interface.api.middleware import get_session_host, require_site
from roam.util.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["authentication"], route_class=DishkaRoute)


class LoginAPIRequest(BaseModel):
    """Login form submission."""

    username: str
    password: str


class LoginPageResponse(BaseModel):
    """State of the login page when no action applies."""

    authenticated: bool


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


@router.get("/login", response_model=None)
async def login_page(
    request: Request,
    remote_login_use_case: FromDishka[RemoteLoginUseCase],
    logout_use_case: FromDishka[LogoutUseCase],
    roaming_session_manager: FromDishka[RoamingSessionManager],
    action: str | None = None,
    token: str | None = None,
) -> RedirectResponse | LoginPageResponse:
    """Login entry point.

    Handles the remote-login action, the logout action and reauthentication
    bypass. Anything else reports whether a session exists.

    Examples:
        GET /login?action=remote_login&token=eyJ...
        Redirects to: https://site2.example.com/ (or /?error=token_expired)

        GET /login?reauth=1&redirect_to=/dashboard
        Redirects to: /dashboard (when already logged in)
    """
    session = get_session_host(request)

    if action == "remote_login":
        response = await remote_login_use_case.execute(
            RemoteLoginRequest(token=token or "", client_ip=session.client_ip, host=session.host),
            session,
        )
        return RedirectResponse(url=response.redirect_url, status_code=status.HTTP_302_FOUND)

    if action == "logout":
        await logout_use_case.execute(session)
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)

    redirect_to = roaming_session_manager.maybe_bypass_reauth(session)
    if redirect_to is not None:
        logger.info("Reauthentication bypassed")
        return RedirectResponse(url=redirect_to, status_code=status.HTTP_302_FOUND)

    return LoginPageResponse(authenticated=session.current_identity_id is not None)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginAPIRequest,
    request: Request,
    login_use_case: FromDishka[LoginUseCase],
) -> LoginResponse:
    """Log in with credentials of the current site.

    Sets the session cookie, plus the roaming cookie for roaming identities.

    Raises:
        HTTPException: 404 for an unknown site, 401 for bad credentials
    """
    site = require_site(request)
    try:
        return await login_use_case.execute(
            LoginRequest(site_id=site.id, username=body.username, password=body.password),
            get_session_host(request),
        )
    except AuthFailedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


@router.api_route("/logout", methods=["GET", "POST"], response_model=LogoutResponse)
async def logout(
    request: Request,
    logout_use_case: FromDishka[LogoutUseCase],
) -> LogoutResponse:
    """Log out, deleting the roaming cookie before the session cookie."""
    await logout_use_case.execute(get_session_host(request))
    return LogoutResponse(success=True, message="Successfully logged out")


@router.get("/auth/me", response_model=GetCurrentIdentityResponse)
async def get_current_identity(
    request: Request,
    get_current_identity_use_case: FromDishka[GetCurrentIdentityUseCase],
) -> GetCurrentIdentityResponse:
    """Current identity, or ``authenticated: false`` for anonymous requests."""
    return await get_current_identity_use_case.execute(
        GetCurrentIdentityRequest(identity_id=get_session_host(request).current_identity_id)
    )
