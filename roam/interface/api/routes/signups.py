"""Signup routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from roam.application.usecase.signup import ValidateSignupUseCase
from roam.application.usecase.signup.validate_signup import (
    ValidateSignupRequest,
    ValidateSignupResponse,
)
from roam.interface.api.middleware import require_site

router = APIRouter(prefix="/signups", tags=["signups"], route_class=DishkaRoute)


class SignupAPIRequest(BaseModel):
    """Signup form submission."""

    user_name: str = Field(min_length=1)
    user_email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")


@router.post("", response_model=ValidateSignupResponse)
async def validate_signup(
    body: SignupAPIRequest,
    request: Request,
    validate_signup_use_case: FromDishka[ValidateSignupUseCase],
) -> ValidateSignupResponse:
    """Validate a signup against the current site's reservations and reserve it."""
    site = require_site(request)
    return await validate_signup_use_case.execute(
        ValidateSignupRequest(
            site_id=site.id, user_name=body.user_name, user_email=body.user_email
        )
    )
