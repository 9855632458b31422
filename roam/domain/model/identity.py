"""Identity entity.

Each tenant site keeps its own identities. A secondary identity may point at
the primary identity (on the root site) it has been linked to.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from roam.domain.model.common import DomainModel
from roam.domain.value import IdentityId, SiteId


class Identity(DomainModel):
    """Site-scoped identity record."""

    id: IdentityId
    user_login: str
    user_email: str
    password_hash: str = Field(repr=False)
    site_id: SiteId
    main_id: Optional[IdentityId] = None  # Primary identity this one is linked to
    created_at: datetime = Field(default_factory=datetime.now)
