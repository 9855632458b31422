"""Pending signup entity.

A signup reserves a login and an email on one site until it is activated.
"""

from datetime import datetime

from pydantic import Field

from roam.domain.model.common import DomainModel
from roam.domain.value import SiteId


class PendingSignup(DomainModel):
    """Site-scoped signup reservation."""

    user_login: str
    user_email: str
    site_id: SiteId
    activation_key: str
    registered_at: datetime = Field(default_factory=datetime.now)
