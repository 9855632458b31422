"""Strongly typed identifiers for Roam domain entities.

Identities are keyed by UUID across the whole network; tenant sites keep the
small integer ids the host platform hands out.
"""

from typing import NewType
from uuid import UUID

IdentityId = NewType("IdentityId", UUID)
SiteId = NewType("SiteId", int)
