"""Network option use cases."""

from .get_network_options import GetNetworkOptionsUseCase
from .rotate_secret_key import RotateSecretKeyUseCase
from .update_network_options import UpdateNetworkOptionsUseCase

__all__ = [
    "GetNetworkOptionsUseCase",
    "RotateSecretKeyUseCase",
    "UpdateNetworkOptionsUseCase",
]
