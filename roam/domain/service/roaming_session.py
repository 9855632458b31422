"""Roaming session propagation across tenant sites."""

import json
import secrets
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote, unquote, urlsplit

import logfire
from pydantic import ValidationError as PydanticValidationError

from roam.config import Settings
from roam.domain.model.identity import Identity
from roam.domain.value import (
    IdentityId,
    RoamingCookiePayload,
    RoamingCookieState,
    RoamingRejection,
)
from roam.util.clock import Clock
from roam.util.signing import sign, verify

from .base import Service
from .config_service import ConfigService
from .identity_service import IdentityService
from .network_policy import NetworkPolicy


class SessionHost(ABC):
    """The host's view of the current request and its local session.

    Implemented by the interface layer; the manager never touches HTTP
    objects directly.
    """

    @property
    @abstractmethod
    def host(self) -> str:
        """Request host (without port)."""
        pass

    @abstractmethod
    def query_param(self, name: str) -> Optional[str]:
        """Query string parameter of the current request."""
        pass

    @abstractmethod
    def get_cookie(self, name: str) -> Optional[str]:
        """Raw cookie value sent with the request."""
        pass

    @abstractmethod
    def set_cookie(self, name: str, value: str, *, expires: int, domain: str) -> None:
        """Set a secure, http-only, SameSite=Lax cookie on path ``/``.

        Args:
            name: Cookie name
            value: Cookie value, already encoded
            expires: Absolute expiry as a unix timestamp
            domain: Cookie domain
        """
        pass

    @abstractmethod
    def delete_cookie(self, name: str, *, domain: str) -> None:
        """Expire a cookie set on path ``/``."""
        pass

    @property
    @abstractmethod
    def current_identity_id(self) -> Optional[IdentityId]:
        """Identity of the local session, None if anonymous."""
        pass

    @abstractmethod
    async def logout(self) -> None:
        """Tear down the local session."""
        pass

    @abstractmethod
    async def login_as(self, identity_id: IdentityId) -> None:
        """Establish a local session for an identity."""
        pass


class RoamingSessionManager(Service):
    """Reconciles the local session with the signed roaming cookie.

    Runs on every request after the local session is resolved. A valid cookie
    is authoritative: it logs the request in, or replaces a session held by
    another identity. A roaming-eligible identity without a valid cookie is
    logged out.
    """

    def __init__(
        self,
        config_service: ConfigService,
        identity_service: IdentityService,
        policy: NetworkPolicy,
        settings: Settings,
        clock: Clock,
    ) -> None:
        """Initialize roaming session manager.

        Args:
            config_service: Source of the cookie lifetime and signing secret
            identity_service: Identity lookups
            policy: Roaming eligibility
            settings: Application settings (network domain, cookie name)
            clock: Time source
        """
        self.config_service = config_service
        self.identity_service = identity_service
        self.policy = policy
        self.settings = settings
        self.clock = clock

    @property
    def cookie_name(self) -> str:
        return self.settings.auth.roaming_cookie_name

    @property
    def cookie_domain(self) -> str:
        return self.settings.cookie_domain

    def is_domain_compatible(self, host: str) -> bool:
        """Whether the roaming cookie's domain covers ``host``.

        The network domain (no leading dot) must occur in the lower-cased host.
        """
        return self.settings.network.domain in host.lower()

    @staticmethod
    def is_logging_out(session: SessionHost) -> bool:
        return session.query_param("action") == "logout"

    async def read_cookie(self, session: SessionHost) -> RoamingCookieState:
        """Decode and verify the roaming cookie of the request.

        Returns:
            NO_COOKIE, VALID with the payload, or REJECTED with the reason
        """
        raw = session.get_cookie(self.cookie_name)
        if not raw:
            return RoamingCookieState.absent()

        try:
            data = json.loads(unquote(raw))
        except (ValueError, RecursionError):
            return RoamingCookieState.rejected(RoamingRejection.MALFORMED)

        if not isinstance(data, dict) or not isinstance(data.get("sig"), str) or not data["sig"]:
            return RoamingCookieState.rejected(RoamingRejection.MALFORMED)

        signature = data.pop("sig")
        secret = await self.config_service.roaming_secret_key()
        if not verify(data, signature, secret):
            return RoamingCookieState.rejected(RoamingRejection.SIGNATURE_MISMATCH)

        try:
            payload = RoamingCookiePayload.model_validate(data)
        except PydanticValidationError:
            return RoamingCookieState.rejected(RoamingRejection.MALFORMED)

        if self.clock.now() > payload.exp:
            return RoamingCookieState.rejected(RoamingRejection.EXPIRED)

        return RoamingCookieState.valid(payload)

    async def issue_cookie(self, session: SessionHost, identity: Identity) -> RoamingCookiePayload:
        """Sign and set a fresh roaming cookie for an identity."""
        iat = self.clock.now()
        payload = RoamingCookiePayload(
            user_id=identity.id,
            iat=iat,
            exp=iat + await self.config_service.roaming_cookie_expiry(),
            nonce=secrets.token_urlsafe(9),
        )
        data = payload.model_dump(mode="json")
        data["sig"] = sign(data, await self.config_service.roaming_secret_key())

        session.set_cookie(
            self.cookie_name,
            quote(json.dumps(data), safe=""),
            expires=payload.exp,
            domain=self.cookie_domain,
        )
        logfire.info("Roaming cookie issued", identity_id=str(identity.id), exp=payload.exp)
        return payload

    def delete_cookie(self, session: SessionHost) -> None:
        session.delete_cookie(self.cookie_name, domain=self.cookie_domain)

    async def on_validate_session(self, session: SessionHost) -> RoamingCookieState:
        """Reconcile the local session with the roaming cookie.

        Args:
            session: Current request

        Returns:
            The cookie state the decision was based on
        """
        if not self.is_domain_compatible(session.host):
            return RoamingCookieState.absent()

        if self.is_logging_out(session):
            return RoamingCookieState.absent()

        state = await self.read_cookie(session)
        if state.reason is not None:
            logfire.debug("Roaming cookie rejected", reason=state.reason.value)
            self.delete_cookie(session)

        cookie_identity: Optional[Identity] = None
        if state.payload is not None:
            cookie_identity = await self.identity_service.find_by_id(state.payload.user_id)
            if cookie_identity is None or not self.policy.is_roaming(cookie_identity):
                logfire.debug(
                    "Roaming cookie identity no longer roams",
                    identity_id=str(state.payload.user_id),
                )
                self.delete_cookie(session)
                cookie_identity = None
                state = RoamingCookieState.absent()

        current_id = session.current_identity_id

        if cookie_identity is not None:
            if current_id is None:
                await session.login_as(cookie_identity.id)
                logfire.info("Roaming session established", identity_id=str(cookie_identity.id))
            elif current_id != cookie_identity.id:
                await session.logout()
                await session.login_as(cookie_identity.id)
                logfire.info(
                    "Roaming session took over local session",
                    identity_id=str(cookie_identity.id),
                    previous_identity_id=str(current_id),
                )
            return state

        if current_id is not None:
            current = await self.identity_service.find_by_id(current_id)
            if current is not None and self.policy.is_roaming(current):
                await session.logout()
                logfire.info(
                    "Roaming identity without roaming cookie logged out",
                    identity_id=str(current_id),
                )

        return state

    async def on_login(self, session: SessionHost, identity: Identity) -> None:
        """Issue a roaming cookie when a roaming-eligible identity logs in."""
        if self.policy.is_roaming(identity):
            await self.issue_cookie(session, identity)

    async def on_logout(self, session: SessionHost) -> None:
        """Delete the roaming cookie ahead of session teardown."""
        self.delete_cookie(session)

    def maybe_bypass_reauth(self, session: SessionHost) -> Optional[str]:
        """Redirect target when a reauthentication can be skipped.

        Returns:
            The ``redirect_to`` URL if a local session exists, ``reauth=1`` is
            requested and the target stays within the network; otherwise None
        """
        if session.current_identity_id is None:
            return None
        if session.query_param("reauth") != "1":
            return None

        redirect_to = session.query_param("redirect_to")
        if not redirect_to or not self.is_safe_redirect(redirect_to):
            return None
        return redirect_to

    def is_safe_redirect(self, url: str) -> bool:
        """Whether ``url`` is relative or points at a host of the network."""
        parts = urlsplit(url.strip())
        if not parts.scheme and not parts.netloc:
            return not url.strip().startswith(("//", "\\"))
        if parts.scheme not in ("http", "https") or not parts.hostname:
            return False
        host = parts.hostname.lower()
        domain = self.settings.network.domain
        return host == domain or host.endswith("." + domain)
