"""Shared pieces of the network option use cases."""

from pydantic import BaseModel

from roam.domain.error import UnauthorizedError
from roam.domain.service import IdentityService, NetworkPolicy
from roam.domain.value import IdentityId, SiteId


class NetworkOptionsResponse(BaseModel):
    """Current network options."""

    cache_expiry: int
    roaming_cookie_expiry: int
    remote_login_token_expiry: int
    rate_limit_max: int
    rate_limit_wait: int
    uses_default_secret: bool


async def require_network_admin(
    identity_service: IdentityService,
    policy: NetworkPolicy,
    identity_id: IdentityId,
    site_id: SiteId,
) -> None:
    """Raise UnauthorizedError unless a network administrator acts on the root site."""
    acting = await identity_service.find_by_id(identity_id)
    if acting is None or not policy.can_manage_network_users(acting, site_id):
        raise UnauthorizedError()
