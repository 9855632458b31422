"""Domain value objects for Roam."""

from roam.domain.value.identifiers import IdentityId, SiteId
from roam.domain.value.types import (
    InvalidTokenReason,
    LinkedAccount,
    NetworkOption,
    RemoteLoginError,
    RemoteLoginOutcome,
    RoamingCookiePayload,
    RoamingCookieState,
    RoamingRejection,
    RoamingState,
    SignedTokenPayload,
)

__all__ = [
    # Identifiers
    "IdentityId",
    "SiteId",
    # Types
    "InvalidTokenReason",
    "LinkedAccount",
    "NetworkOption",
    "RemoteLoginError",
    "RemoteLoginOutcome",
    "RoamingCookiePayload",
    "RoamingCookieState",
    "RoamingRejection",
    "RoamingState",
    "SignedTokenPayload",
]
