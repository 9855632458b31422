"""Site-scoped signup reservations."""

import secrets
from datetime import datetime, timezone

import logfire
from pydantic import Field

from roam.domain.model.signup import PendingSignup
from roam.domain.repository import SignupRepository
from roam.domain.value import SiteId
from roam.domain.value.common import ValueObject
from roam.util.clock import Clock

from .base import Service

# Reservations older than this no longer block a login or email.
RESERVATION_SECONDS = 2 * 24 * 60 * 60

USER_NAME_RESERVED = (
    "That username is currently reserved but may be available in a couple of days."
)
USER_EMAIL_RESERVED = (
    "That email address has already been used. Please check your inbox for an "
    "activation email. It will become available in a couple of days if you do nothing."
)


class SignupValidation(ValueObject):
    """Result of validating a signup against the site's reservations."""

    user_name: str
    orig_username: str
    user_email: str
    errors: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class SignupService(Service):
    """Checks and records signup reservations per site.

    The same login or email may be reserved independently on every site.
    """

    def __init__(self, signup_repository: SignupRepository, clock: Clock) -> None:
        self.signup_repository = signup_repository
        self.clock = clock

    def _is_stale(self, signup: PendingSignup) -> bool:
        return self.clock.now() - int(signup.registered_at.timestamp()) > RESERVATION_SECONDS

    async def validate_signup(
        self, site_id: SiteId, user_name: str, user_email: str
    ) -> SignupValidation:
        """Validate a login and email against reservations on a site.

        Stale reservations are deleted on the way.

        Args:
            site_id: Site the signup happens on
            user_name: Requested login
            user_email: Requested email

        Returns:
            The submitted values and any per-field errors
        """
        errors: dict[str, list[str]] = {}

        signup = await self.signup_repository.find_by_login(site_id, user_name)
        if signup is not None:
            if self._is_stale(signup):
                await self.signup_repository.delete(signup)
            else:
                errors.setdefault("user_name", []).append(USER_NAME_RESERVED)

        signup = await self.signup_repository.find_by_email(site_id, user_email)
        if signup is not None:
            if self._is_stale(signup):
                await self.signup_repository.delete(signup)
            else:
                errors.setdefault("user_email", []).append(USER_EMAIL_RESERVED)

        if errors:
            logfire.info("Signup blocked by reservation", site_id=site_id, fields=list(errors))

        return SignupValidation(
            user_name=user_name,
            orig_username=user_name,
            user_email=user_email,
            errors=errors,
        )

    async def reserve(self, site_id: SiteId, user_login: str, user_email: str) -> PendingSignup:
        """Record a signup reservation on a site."""
        with logfire.span("signup_service.reserve", site_id=site_id):
            return await self.signup_repository.save(
                PendingSignup(
                    user_login=user_login,
                    user_email=user_email,
                    site_id=site_id,
                    activation_key=secrets.token_hex(8),
                    registered_at=datetime.fromtimestamp(self.clock.now(), tz=timezone.utc),
                )
            )
