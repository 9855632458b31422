"""In-memory pending cleanup repository for testing."""

from roam.domain.repository.cleanup import PendingCleanupRepository
from roam.domain.value import IdentityId, SiteId


class InMemoryPendingCleanupRepository(PendingCleanupRepository):
    """In-memory implementation of PendingCleanupRepository for testing."""

    def __init__(self) -> None:
        self._pending: dict[SiteId, list[IdentityId]] = {}

    async def mark(self, site_id: SiteId, identity_id: IdentityId) -> None:
        pending = self._pending.setdefault(site_id, [])
        if identity_id not in pending:
            pending.append(identity_id)

    async def pending_for_site(self, site_id: SiteId) -> list[IdentityId]:
        return list(self._pending.get(site_id, []))
