"""Pending signup repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from roam.domain.model.signup import PendingSignup
from roam.domain.value import SiteId


class SignupRepository(ABC):
    """Repository for site-scoped signup reservations."""

    @abstractmethod
    async def find_by_login(
        self, site_id: SiteId, login: str
    ) -> Optional[PendingSignup]:
        """Find a pending signup reserving a login on a site."""
        pass

    @abstractmethod
    async def find_by_email(
        self, site_id: SiteId, email: str
    ) -> Optional[PendingSignup]:
        """Find a pending signup reserving an email on a site."""
        pass

    @abstractmethod
    async def delete(self, signup: PendingSignup) -> None:
        """Delete a pending signup."""
        pass

    @abstractmethod
    async def save(self, signup: PendingSignup) -> PendingSignup:
        """Save a pending signup."""
        pass
