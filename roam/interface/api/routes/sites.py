"""Site membership routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, Response, status

from roam.application.usecase.site import RemoveMemberUseCase
from roam.application.usecase.site.remove_member import RemoveMemberRequest
from roam.domain.error import NotFoundError, SiteScopeError, UnauthorizedError
from roam.domain.value import IdentityId, SiteId
from roam.interface.api.middleware import require_identity_id, require_site

router = APIRouter(prefix="/sites", tags=["sites"], route_class=DishkaRoute)


@router.delete(
    "/{site_id}/members/{identity_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_member(
    site_id: SiteId,
    identity_id: IdentityId,
    request: Request,
    remove_member_use_case: FromDishka[RemoveMemberUseCase],
) -> Response:
    """Remove an identity from a site and queue it for cleanup.

    Raises:
        HTTPException: 403 when not allowed, 404 for an unknown identity
    """
    acting_identity_id = require_identity_id(request)
    site = require_site(request)
    try:
        await remove_member_use_case.execute(
            RemoveMemberRequest(
                site_id=site_id,
                identity_id=identity_id,
                acting_identity_id=acting_identity_id,
                acting_site_id=site.id,
            )
        )
    except (UnauthorizedError, SiteScopeError) as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return Response(status_code=status.HTTP_204_NO_CONTENT)
