"""In-memory signup repository for testing."""

from typing import Optional

from roam.domain.model.signup import PendingSignup
from roam.domain.repository.signup import SignupRepository
from roam.domain.value import SiteId


class InMemorySignupRepository(SignupRepository):
    """In-memory implementation of SignupRepository for testing."""

    def __init__(self) -> None:
        self._signups: list[PendingSignup] = []

    async def find_by_login(self, site_id: SiteId, login: str) -> Optional[PendingSignup]:
        for signup in self._signups:
            if signup.site_id == site_id and signup.user_login == login:
                return signup
        return None

    async def find_by_email(self, site_id: SiteId, email: str) -> Optional[PendingSignup]:
        for signup in self._signups:
            if signup.site_id == site_id and signup.user_email.lower() == email.lower():
                return signup
        return None

    async def delete(self, signup: PendingSignup) -> None:
        self._signups = [s for s in self._signups if s != signup]

    async def save(self, signup: PendingSignup) -> PendingSignup:
        self._signups.append(signup)
        return signup
