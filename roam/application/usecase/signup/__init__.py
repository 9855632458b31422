"""Signup use cases."""

from .validate_signup import ValidateSignupUseCase

__all__ = ["ValidateSignupUseCase"]
