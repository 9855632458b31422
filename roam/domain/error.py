"""Domain layer errors."""

from roam.domain.value.types import InvalidTokenReason, RemoteLoginError


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


# Account linking


class InvalidSiteError(DomainError):
    """Raised when a site URL does not resolve to a tenant site."""

    def __init__(self, site_url: str):
        self.site_url = site_url
        super().__init__("Invalid subsite URL.")


class AuthFailedError(DomainError):
    """Raised when the target identity is unknown or the password is wrong."""

    def __init__(self) -> None:
        super().__init__("Authentication failed.")


class AlreadyLinkedError(DomainError):
    """Raised when an identity is already linked to a different primary."""

    def __init__(self) -> None:
        super().__init__("This account is already linked to another user.")


class UnauthorizedError(DomainError):
    """Raised when the acting identity may not perform an operation."""

    def __init__(self, message: str = "Unauthorized.") -> None:
        super().__init__(message)


class SiteScopeError(DomainError):
    """Raised when an identity is managed from outside its own site."""

    pass


# Remote login


class RemoteLoginFailure(DomainError):
    """Base for remote-login failures.

    Each subclass maps to exactly one coarse redirect error code.
    """

    code: RemoteLoginError


class InvalidTokenError(RemoteLoginFailure):
    """Raised when a remote-login token cannot be decoded or verified."""

    code = RemoteLoginError.INVALID_TOKEN

    _MESSAGES = {
        InvalidTokenReason.MALFORMED: "Malformed token.",
        InvalidTokenReason.STRUCTURE: "Invalid token structure.",
        InvalidTokenReason.SIGNATURE_MISMATCH: "Signature mismatch.",
    }

    def __init__(self, reason: InvalidTokenReason):
        self.reason = reason
        super().__init__(self._MESSAGES[reason])


class IpMismatchError(RemoteLoginFailure):
    """Raised when a token is presented from another address than it was minted for."""

    code = RemoteLoginError.IP_MISMATCH


class TokenExpiredError(RemoteLoginFailure):
    """Raised when a token is older than the configured remote-login window."""

    code = RemoteLoginError.TOKEN_EXPIRED


class RateLimitedError(RemoteLoginFailure):
    """Raised when too many remote logins were attempted for one identity."""

    code = RemoteLoginError.RATE_LIMITED


class UserNotFoundError(RemoteLoginFailure):
    """Raised when the token's identity does not exist on the target site."""

    code = RemoteLoginError.USER_NOT_FOUND
