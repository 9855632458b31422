"""Domain value objects for Roam.

Value objects are immutable and defined by their values, not identity.
They carry the signed payloads exchanged between tenant sites.
"""

from enum import Enum

from pydantic import Field

from roam.domain.value.common import ValueObject
from roam.domain.value.identifiers import IdentityId, SiteId


class InvalidTokenReason(str, Enum):
    """Why a remote-login token failed to decode."""

    MALFORMED = "malformed"
    STRUCTURE = "structure"
    SIGNATURE_MISMATCH = "signature_mismatch"


class RoamingState(str, Enum):
    """Outcome of reading the roaming cookie on a request."""

    NO_COOKIE = "no_cookie"
    VALID = "valid"
    REJECTED = "rejected"


class RoamingRejection(str, Enum):
    """Why a present roaming cookie was not accepted."""

    MALFORMED = "malformed"
    SIGNATURE_MISMATCH = "signature_mismatch"
    EXPIRED = "expired"


class RemoteLoginError(str, Enum):
    """Coarse error codes surfaced in the remote-login redirect."""

    INVALID_TOKEN = "invalid_token"
    IP_MISMATCH = "ip_mismatch"
    TOKEN_EXPIRED = "token_expired"
    RATE_LIMITED = "rate_limited"
    USER_NOT_FOUND = "user_not_found"


class NetworkOption(str, Enum):
    """Tenant-wide options that network administrators can change."""

    CACHE_EXPIRY = "cache_expiry"
    ROAMING_COOKIE_EXPIRY = "roaming_cookie_expiry"
    REMOTE_LOGIN_TOKEN_EXPIRY = "remote_login_token_expiry"
    RATE_LIMIT_MAX = "rate_limit_max"
    RATE_LIMIT_WAIT = "rate_limit_wait"
    ROAMING_SECRET_KEY = "roaming_secret_key"

    @property
    def bounds(self) -> tuple[int, int] | None:
        """Inclusive (min, max) for numeric options, None for the secret."""
        return _OPTION_BOUNDS.get(self)


_OPTION_BOUNDS: dict[NetworkOption, tuple[int, int]] = {
    NetworkOption.CACHE_EXPIRY: (3600, 86400),  # 1h-24h
    NetworkOption.ROAMING_COOKIE_EXPIRY: (1800, 43200),  # 30m-12h
    NetworkOption.REMOTE_LOGIN_TOKEN_EXPIRY: (30, 300),  # 30s-5m
    NetworkOption.RATE_LIMIT_MAX: (3, 10),  # attempts
    NetworkOption.RATE_LIMIT_WAIT: (60, 3600),  # 1m-1h
}


class SignedTokenPayload(ValueObject):
    """Payload of a remote-login token.

    Signed as a whole; the signature never travels inside the payload.
    """

    user_id: IdentityId
    site_id: SiteId
    timestamp: int
    ip: str


class RoamingCookiePayload(ValueObject):
    """Payload of the roaming cookie (everything except ``sig``)."""

    user_id: IdentityId
    iat: int
    exp: int
    nonce: str = Field(min_length=1)


class RoamingCookieState(ValueObject):
    """Result of validating the roaming cookie for one request."""

    state: RoamingState
    payload: RoamingCookiePayload | None = None
    reason: RoamingRejection | None = None

    @classmethod
    def absent(cls) -> "RoamingCookieState":
        return cls(state=RoamingState.NO_COOKIE)

    @classmethod
    def valid(cls, payload: RoamingCookiePayload) -> "RoamingCookieState":
        return cls(state=RoamingState.VALID, payload=payload)

    @classmethod
    def rejected(cls, reason: RoamingRejection) -> "RoamingCookieState":
        return cls(state=RoamingState.REJECTED, reason=reason)

    @property
    def is_valid(self) -> bool:
        return self.state is RoamingState.VALID


class LinkedAccount(ValueObject):
    """Projection of a secondary identity linked to a primary."""

    site_id: SiteId
    site_url: str
    user_login: str
    user_email: str
    identity_id: IdentityId


class RemoteLoginOutcome(ValueObject):
    """Where a remote-login request ends up.

    ``identity_id`` is set only when a session was established; ``error`` only
    when a check failed.
    """

    redirect_url: str
    identity_id: IdentityId | None = None
    error: RemoteLoginError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
