"""Network-wide authorization policy."""

from roam.config import NetworkSettings
from roam.domain.model.identity import Identity
from roam.domain.value import SiteId

from .base import Service


class NetworkPolicy(Service):
    """Decides which identities roam and which hold network-wide rights.

    Network administrators are root-site identities whose login is listed in
    the network settings. Subclass and override ``is_roaming`` to widen or
    narrow the roaming population.
    """

    def __init__(self, network_settings: NetworkSettings) -> None:
        self.network_settings = network_settings

    @property
    def root_site_id(self) -> SiteId:
        return SiteId(self.network_settings.root_site_id)

    def is_network_admin(self, identity: Identity) -> bool:
        """Whether the identity holds network-wide administrative rights."""
        return (
            identity.site_id == self.root_site_id
            and identity.user_login in self.network_settings.network_admins
        )

    def is_roaming(self, identity: Identity) -> bool:
        """Whether the identity may carry its session across tenant sites."""
        return self.is_network_admin(identity)

    def can_manage_network_users(self, identity: Identity, site_id: SiteId) -> bool:
        """Whether the identity may manage any user while acting on ``site_id``."""
        return site_id == self.root_site_id and self.is_network_admin(identity)
