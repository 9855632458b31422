"""Site membership use cases."""

from .remove_member import RemoveMemberUseCase

__all__ = ["RemoveMemberUseCase"]
