"""Domain model entities for Roam."""

from roam.domain.model.identity import Identity
from roam.domain.model.signup import PendingSignup
from roam.domain.model.site import Site

__all__ = [
    "Identity",
    "PendingSignup",
    "Site",
]
