"""Repository interfaces for the Roam domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from roam.domain.repository.cache import Cache
from roam.domain.repository.cleanup import PendingCleanupRepository
from roam.domain.repository.identity import IdentityRepository
from roam.domain.repository.options import NetworkOptionsRepository
from roam.domain.repository.signup import SignupRepository
from roam.domain.repository.site import SiteRepository

__all__ = [
    "Cache",
    "IdentityRepository",
    "NetworkOptionsRepository",
    "PendingCleanupRepository",
    "SignupRepository",
    "SiteRepository",
]
