"""Validate signup use case."""

import logfire
from pydantic import BaseModel, Field

from roam.domain.service import SignupService, SignupValidation
from roam.domain.value import SiteId
from roam.util.events import EventBus, HostEvent


class ValidateSignupRequest(BaseModel):
    """Signup form submission on a site."""

    site_id: SiteId
    user_name: str
    user_email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")


class ValidateSignupResponse(BaseModel):
    """Validation outcome; the reservation is kept only when there are no errors."""

    user_name: str
    orig_username: str
    user_email: str
    errors: dict[str, list[str]]
    reserved: bool


class ValidateSignupUseCase:
    """Use case for validating a signup and reserving its login and email."""

    def __init__(self, event_bus: EventBus, signup_service: SignupService) -> None:
        self.event_bus = event_bus
        self.signup_service = signup_service

    async def execute(self, request: ValidateSignupRequest) -> ValidateSignupResponse:
        """Run signup validation handlers, then reserve the signup if clean.

        Errors reported by every handler are merged per field.
        """
        user_name = request.user_name.strip()
        user_email = request.user_email.strip().lower()

        results = await self.event_bus.emit(
            HostEvent.SIGNUP_VALIDATE,
            site_id=request.site_id,
            user_name=user_name,
            user_email=user_email,
        )

        errors: dict[str, list[str]] = {}
        for result in results:
            if isinstance(result, SignupValidation):
                for field, messages in result.errors.items():
                    errors.setdefault(field, []).extend(messages)

        reserved = False
        if not errors:
            await self.signup_service.reserve(request.site_id, user_name, user_email)
            reserved = True
            logfire.info("Signup reserved", site_id=request.site_id)

        return ValidateSignupResponse(
            user_name=user_name,
            orig_username=request.user_name,
            user_email=user_email,
            errors=errors,
            reserved=reserved,
        )
