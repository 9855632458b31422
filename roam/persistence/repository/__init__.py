"""PostgreSQL repository implementations."""

from roam.persistence.repository.cleanup import PostgresPendingCleanupRepository
from roam.persistence.repository.identity import PostgresIdentityRepository
from roam.persistence.repository.options import PostgresNetworkOptionsRepository
from roam.persistence.repository.signup import PostgresSignupRepository
from roam.persistence.repository.site import PostgresSiteRepository

__all__ = [
    "PostgresIdentityRepository",
    "PostgresNetworkOptionsRepository",
    "PostgresPendingCleanupRepository",
    "PostgresSignupRepository",
    "PostgresSiteRepository",
]
