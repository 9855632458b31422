"""Network option routes (network administrators only)."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, Response, status
from pydantic import BaseModel

from roam.application.usecase.network import (
    GetNetworkOptionsUseCase,
    RotateSecretKeyUseCase,
    UpdateNetworkOptionsUseCase,
)
from roam.application.usecase.network.common import NetworkOptionsResponse
from roam.application.usecase.network.get_network_options import (
    GetNetworkOptionsRequest,
)
from roam.application.usecase.network.rotate_secret_key import RotateSecretKeyRequest
from roam.application.usecase.network.update_network_options import (
    UpdateNetworkOptionsRequest,
)
from roam.domain.error import UnauthorizedError, ValidationError
from roam.interface.api.middleware import require_identity_id, require_site

router = APIRouter(prefix="/network", tags=["network"], route_class=DishkaRoute)


class UpdateOptionsAPIRequest(BaseModel):
    """Partial update of the numeric options."""

    cache_expiry: int | None = None
    roaming_cookie_expiry: int | None = None
    remote_login_token_expiry: int | None = None
    rate_limit_max: int | None = None
    rate_limit_wait: int | None = None


def _forbidden(e: UnauthorizedError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


@router.get("/options", response_model=NetworkOptionsResponse)
async def get_options(
    request: Request,
    get_options_use_case: FromDishka[GetNetworkOptionsUseCase],
) -> NetworkOptionsResponse:
    """Current network options."""
    identity_id = require_identity_id(request)
    site = require_site(request)
    try:
        return await get_options_use_case.execute(
            GetNetworkOptionsRequest(acting_identity_id=identity_id, acting_site_id=site.id)
        )
    except UnauthorizedError as e:
        raise _forbidden(e)


@router.put("/options", response_model=NetworkOptionsResponse)
async def update_options(
    body: UpdateOptionsAPIRequest,
    request: Request,
    update_options_use_case: FromDishka[UpdateNetworkOptionsUseCase],
) -> NetworkOptionsResponse:
    """Change network options; nothing is stored if any value is out of range.

    Example:
        PUT /network/options
        {"rate_limit_max": 3, "rate_limit_wait": 600}
    """
    identity_id = require_identity_id(request)
    site = require_site(request)
    try:
        return await update_options_use_case.execute(
            UpdateNetworkOptionsRequest(
                **body.model_dump(),
                acting_identity_id=identity_id,
                acting_site_id=site.id,
            )
        )
    except UnauthorizedError as e:
        raise _forbidden(e)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/secret", status_code=status.HTTP_204_NO_CONTENT)
async def rotate_secret(
    request: Request,
    rotate_secret_use_case: FromDishka[RotateSecretKeyUseCase],
) -> Response:
    """Rotate the network signing secret."""
    identity_id = require_identity_id(request)
    site = require_site(request)
    try:
        await rotate_secret_use_case.execute(
            RotateSecretKeyRequest(acting_identity_id=identity_id, acting_site_id=site.id)
        )
    except UnauthorizedError as e:
        raise _forbidden(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
