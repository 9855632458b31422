"""Tenant site entity."""

from pydantic import Field

from roam.domain.model.common import DomainModel
from roam.domain.value import SiteId


class Site(DomainModel):
    """A tenant site of the network, addressed by domain and path."""

    id: SiteId
    domain: str
    path: str = "/"
    scheme: str = Field(default="https", pattern="^https?$")

    @property
    def url(self) -> str:
        """Base URL of the site, without a trailing slash."""
        return f"{self.scheme}://{self.domain}{self.path.rstrip('/')}"

    @property
    def home_url(self) -> str:
        """Site home location."""
        return f"{self.url}/"
