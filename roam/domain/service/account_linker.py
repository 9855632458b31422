"""Account linking and remote login domain service."""

import json
from typing import Optional
from urllib.parse import quote, urlsplit

import logfire

from roam.domain.error import (
    AlreadyLinkedError,
    AuthFailedError,
    InvalidSiteError,
    IpMismatchError,
    NotFoundError,
    RateLimitedError,
    RemoteLoginFailure,
    TokenExpiredError,
    UnauthorizedError,
    UserNotFoundError,
)
from roam.domain.model.identity import Identity
from roam.domain.model.site import Site
from roam.domain.repository import Cache, IdentityRepository, SiteRepository
from roam.domain.value import (
    IdentityId,
    LinkedAccount,
    RemoteLoginOutcome,
    SiteId,
)
from roam.util.clock import Clock
from roam.util.password import check_password

from .base import Service
from .config_service import ConfigService
from .identity_service import IdentityService
from .network_policy import NetworkPolicy
from .rate_limiter import RateLimiter
from .roaming_session import SessionHost
from .token_service import TokenService


class AccountLinker(Service):
    """Links per-site identities to a primary identity and logs them in remotely.

    Linking sets the secondary identity's ``main_id``; a linked identity can
    then be entered from the primary's profile through a short-lived signed
    login URL.
    """

    def __init__(
        self,
        identity_repository: IdentityRepository,
        site_repository: SiteRepository,
        identity_service: IdentityService,
        token_service: TokenService,
        rate_limiter: RateLimiter,
        config_service: ConfigService,
        cache: Cache,
        policy: NetworkPolicy,
        clock: Clock,
    ) -> None:
        """Initialize account linker.

        Args:
            identity_repository: Identity store
            site_repository: Site store
            identity_service: Site-scoped identity lookups
            token_service: Remote-login token codec
            rate_limiter: Remote-login attempt limiter
            config_service: Tenant-wide options
            cache: Keyed cache (linked-account lists)
            policy: Network policy (elevated authorization)
            clock: Time source
        """
        self.identity_repository = identity_repository
        self.site_repository = site_repository
        self.identity_service = identity_service
        self.token_service = token_service
        self.rate_limiter = rate_limiter
        self.config_service = config_service
        self.cache = cache
        self.policy = policy
        self.clock = clock

    @staticmethod
    def _linked_cache_key(main_id: IdentityId) -> str:
        return f"linked:{main_id}"

    async def resolve_site(self, site_url: str) -> Site:
        """Resolve a site URL to a tenant site.

        Raises:
            InvalidSiteError: If the URL has no host or no site lives there
        """
        url = site_url.strip()
        host = urlsplit(url if "//" in url else f"//{url}").hostname
        site = await self.site_repository.find_by_domain(host, "/") if host else None
        if site is None:
            raise InvalidSiteError(site_url)
        return site

    async def link_account(
        self,
        main_id: IdentityId,
        site_url: str,
        username_or_email: str,
        password: str,
    ) -> LinkedAccount:
        """Link an identity on another site to a primary identity.

        Args:
            main_id: Primary identity
            site_url: URL of the site holding the secondary identity
            username_or_email: Login name or email on that site
            password: Password of the secondary identity

        Returns:
            Projection of the linked identity

        Raises:
            InvalidSiteError: If the site URL does not resolve
            AuthFailedError: If the identity is unknown or the password is wrong
            AlreadyLinkedError: If the identity is linked to another primary
        """
        with logfire.span("account_linker.link_account", main_id=str(main_id)):
            site = await self.resolve_site(site_url)

            target = await self.identity_service.find_by_login_on_site(
                site.id, username_or_email, roaming_fallback=False
            ) or await self.identity_service.find_by_email_on_site(
                site.id, username_or_email, roaming_fallback=False
            )
            if target is None or not check_password(password, target.password_hash):
                logfire.warn("Account link authentication failed", site_id=site.id)
                raise AuthFailedError()

            self._ensure_linkable(target, main_id)

            # Re-read right before writing; concurrent links are last-writer-wins
            current = await self.identity_repository.find_by_id(target.id)
            if current is None:
                raise AuthFailedError()
            self._ensure_linkable(current, main_id)

            if current.main_id != main_id:
                current = await self.identity_repository.save(
                    current.model_copy(update={"main_id": main_id})
                )
            await self.cache.delete(self._linked_cache_key(main_id))

            logfire.info(
                "Account linked",
                main_id=str(main_id),
                identity_id=str(current.id),
                site_id=site.id,
            )
            return LinkedAccount(
                site_id=site.id,
                site_url=site_url,
                user_login=current.user_login,
                user_email=current.user_email,
                identity_id=current.id,
            )

    @staticmethod
    def _ensure_linkable(identity: Identity, main_id: IdentityId) -> None:
        if identity.main_id is not None and identity.main_id != main_id:
            raise AlreadyLinkedError()

    async def unlink_account(
        self, target_id: IdentityId, acting: Identity, acting_site_id: SiteId
    ) -> None:
        """Clear the link of an identity.

        Allowed for the identity's own primary and for network administrators
        acting on the root site.

        Args:
            target_id: Identity to unlink
            acting: Identity performing the request
            acting_site_id: Site the request is made on

        Raises:
            UnauthorizedError: If the acting identity may not unlink the target
            NotFoundError: If the target does not exist
        """
        with logfire.span(
            "account_linker.unlink_account",
            target_id=str(target_id),
            acting_id=str(acting.id),
        ):
            target = await self.identity_repository.find_by_id(target_id)

            is_primary = target is not None and target.main_id == acting.id
            if not is_primary and not self.policy.can_manage_network_users(
                acting, acting_site_id
            ):
                logfire.warn(
                    "Unauthorized unlink attempt",
                    target_id=str(target_id),
                    acting_id=str(acting.id),
                )
                raise UnauthorizedError("Unauthorized unlink attempt.")

            if target is None:
                raise NotFoundError("Identity", str(target_id))

            previous_main_id = target.main_id
            if previous_main_id is not None:
                await self.identity_repository.save(target.model_copy(update={"main_id": None}))
                await self.cache.delete(self._linked_cache_key(previous_main_id))

            logfire.info("Account unlinked", identity_id=str(target_id))

    async def get_linked_accounts(self, main_id: IdentityId) -> list[LinkedAccount]:
        """List the identities linked to a primary, outside the root site.

        The list is cached for ``cache_expiry`` seconds and dropped on every
        link or unlink involving the primary.
        """
        key = self._linked_cache_key(main_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return [LinkedAccount.model_validate(item) for item in json.loads(cached)]

        accounts: list[LinkedAccount] = []
        sites: dict[SiteId, Optional[Site]] = {}
        for identity in await self.identity_repository.find_linked(
            main_id, self.policy.root_site_id
        ):
            if identity.site_id not in sites:
                sites[identity.site_id] = await self.site_repository.find_by_id(identity.site_id)
            site = sites[identity.site_id]
            if site is None:
                continue
            accounts.append(
                LinkedAccount(
                    site_id=site.id,
                    site_url=site.url,
                    user_login=identity.user_login,
                    user_email=identity.user_email,
                    identity_id=identity.id,
                )
            )

        await self.cache.set(
            key,
            json.dumps([account.model_dump(mode="json") for account in accounts]),
            await self.config_service.cache_expiry(),
        )
        return accounts

    async def generate_login_url(self, identity_id: IdentityId, site_id: SiteId, ip: str) -> str:
        """Build a remote-login URL for an identity on a site.

        Args:
            identity_id: Identity to log in
            site_id: Site to log in on
            ip: Address the URL will be opened from

        Returns:
            ``<site url>/login?action=remote_login&token=<token>``

        Raises:
            NotFoundError: If the site does not exist
        """
        site = await self.site_repository.find_by_id(site_id)
        if site is None:
            raise NotFoundError("Site", str(site_id))

        token = await self.token_service.generate(identity_id, site_id, ip)
        return f"{site.url}/login?action=remote_login&token={quote(token, safe='')}"

    async def remote_login(
        self,
        token: str,
        client_ip: str,
        site: Optional[Site],
        session: SessionHost,
    ) -> RemoteLoginOutcome:
        """Log a request in from a remote-login token.

        Checks run in order and the first failure ends the request: decode,
        address binding, age, rate limit, identity resolution. Only then is a
        session established.

        Args:
            token: Token from the login URL
            client_ip: Source address of the request
            site: Site the request was made on, if it resolved
            session: Current request's session host

        Returns:
            Redirect target, plus the identity on success or the error code
        """
        home = site.home_url if site is not None else "/"

        with logfire.span("account_linker.remote_login", site_id=site.id if site else None):
            try:
                identity = await self._check_remote_login(token, client_ip, site)
            except RemoteLoginFailure as e:
                logfire.info("Remote login rejected", error=e.code.value)
                return RemoteLoginOutcome(
                    redirect_url=f"{home}?error={e.code.value}", error=e.code
                )

            await session.login_as(identity.id)
            logfire.info(
                "Remote login succeeded",
                identity_id=str(identity.id),
                site_id=identity.site_id,
            )
            return RemoteLoginOutcome(redirect_url=home, identity_id=identity.id)

    async def _check_remote_login(
        self, token: str, client_ip: str, site: Optional[Site]
    ) -> Identity:
        payload = await self.token_service.decode(token)

        if payload.ip != client_ip:
            raise IpMismatchError()

        age = self.clock.now() - payload.timestamp
        if age > await self.config_service.remote_login_token_expiry():
            raise TokenExpiredError()

        allowed = await self.rate_limiter.check_and_increment(
            f"remote_login:{payload.user_id}",
            await self.config_service.rate_limit_max(),
            await self.config_service.rate_limit_wait(),
        )
        if not allowed:
            raise RateLimitedError()

        identity = None
        if site is not None:
            identity = await self.identity_service.find_by_id_on_site(payload.user_id, site.id)
        if identity is None:
            raise UserNotFoundError()
        return identity
