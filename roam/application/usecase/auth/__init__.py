"""Authentication use cases."""

from .get_current_identity import GetCurrentIdentityUseCase
from .login import LoginUseCase
from .logout import LogoutUseCase
from .remote_login import RemoteLoginUseCase

__all__ = [
    "GetCurrentIdentityUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "RemoteLoginUseCase",
]
