"""Identity domain service."""

from collections.abc import Awaitable, Callable
from typing import Optional

import logfire

from roam.domain.error import AuthFailedError, NotFoundError
from roam.domain.model.identity import Identity
from roam.domain.repository import IdentityRepository
from roam.domain.value import IdentityId, SiteId
from roam.util.password import check_password

from .base import Service
from .network_policy import NetworkPolicy


class IdentityService(Service):
    """Site-scoped identity lookups and credential checks.

    Lookups that miss on a tenant site fall back to the root site, but only
    roaming-eligible root identities are returned from that fallback.
    """

    def __init__(
        self, identity_repository: IdentityRepository, policy: NetworkPolicy
    ) -> None:
        """Initialize identity service.

        Args:
            identity_repository: Identity store
            policy: Network policy (roaming eligibility)
        """
        self.identity_repository = identity_repository
        self.policy = policy

    async def get_by_id(self, identity_id: IdentityId) -> Identity:
        """Get identity by ID.

        Raises:
            NotFoundError: If the identity does not exist
        """
        identity = await self.identity_repository.find_by_id(identity_id)
        if identity is None:
            raise NotFoundError("Identity", str(identity_id))
        return identity

    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find identity by ID, unscoped."""
        return await self.identity_repository.find_by_id(identity_id)

    async def find_by_id_on_site(
        self, identity_id: IdentityId, site_id: SiteId
    ) -> Optional[Identity]:
        """Find an identity that may act on a site.

        Args:
            identity_id: Identity ID
            site_id: Site being accessed

        Returns:
            The identity if it belongs to the site or roams from the root site
        """
        identity = await self.identity_repository.find_by_id(identity_id)
        if identity is None:
            return None
        if identity.site_id == site_id:
            return identity
        if identity.site_id == self.policy.root_site_id and self.policy.is_roaming(identity):
            return identity
        return None

    async def find_by_login_on_site(
        self, site_id: SiteId, login: str, *, roaming_fallback: bool = True
    ) -> Optional[Identity]:
        """Find identity by login within a site."""
        return await self._scoped(
            site_id,
            lambda sid: self.identity_repository.find_by_login(sid, login.strip()),
            roaming_fallback,
        )

    async def find_by_email_on_site(
        self, site_id: SiteId, email: str, *, roaming_fallback: bool = True
    ) -> Optional[Identity]:
        """Find identity by email within a site."""
        return await self._scoped(
            site_id,
            lambda sid: self.identity_repository.find_by_email(sid, email.strip().lower()),
            roaming_fallback,
        )

    async def _scoped(
        self,
        site_id: SiteId,
        lookup: Callable[[SiteId], Awaitable[Optional[Identity]]],
        roaming_fallback: bool,
    ) -> Optional[Identity]:
        identity = await lookup(site_id)
        if identity is not None or not roaming_fallback:
            return identity
        if site_id == self.policy.root_site_id:
            return None

        fallback = await lookup(self.policy.root_site_id)
        if fallback is not None and self.policy.is_roaming(fallback):
            logfire.info(
                "Roaming identity resolved from root site",
                identity_id=str(fallback.id),
                site_id=site_id,
            )
            return fallback
        return None

    async def authenticate(
        self,
        site_id: SiteId,
        username_or_email: str,
        password: str,
        *,
        roaming_fallback: bool = True,
    ) -> Identity:
        """Verify credentials of an identity on a site.

        The login name is tried first, then the email address.

        Args:
            site_id: Site the credentials belong to
            username_or_email: Login name or email
            password: Plain-text password
            roaming_fallback: Whether root-site roaming identities qualify

        Returns:
            The authenticated identity

        Raises:
            AuthFailedError: If no identity matches or the password is wrong
        """
        with logfire.span("identity_service.authenticate", site_id=site_id):
            identity = await self.find_by_login_on_site(
                site_id, username_or_email, roaming_fallback=roaming_fallback
            ) or await self.find_by_email_on_site(
                site_id, username_or_email, roaming_fallback=roaming_fallback
            )

            if identity is None or not check_password(password, identity.password_hash):
                logfire.warn("Authentication failed", site_id=site_id)
                raise AuthFailedError()

            return identity

    async def save(self, identity: Identity) -> Identity:
        """Save identity (create or update)."""
        with logfire.span(
            "identity_service.save", identity_id=str(identity.id), site_id=identity.site_id
        ):
            return await self.identity_repository.save(identity)
