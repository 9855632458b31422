"""Local session domain service."""

import hashlib
import hmac

import logfire

from roam.config import AuthSettings
from roam.domain.value import IdentityId
from roam.util.clock import Clock
from roam.util.jwt import JWTError, TokenPayload, create_token, verify_token
from roam.util.signing import constant_time_equals

from .base import Service

# A nonce stays valid for one to two ticks of 12 hours.
NONCE_TICK = 43200


class SessionService(Service):
    """Issues and reads the per-site session token, plus form nonces."""

    def __init__(self, auth_settings: AuthSettings, clock: Clock) -> None:
        """Initialize session service.

        Args:
            auth_settings: Authentication settings
            clock: Time source for nonce rotation
        """
        self.auth_settings = auth_settings
        self.clock = clock

    def create_token(self, identity_id: IdentityId) -> str:
        """Create a session token for an identity."""
        with logfire.span("session_service.create_token", identity_id=str(identity_id)):
            return create_token(identity_id, self.auth_settings)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify a session token.

        Raises:
            JWTError: If token is invalid or expired
        """
        return verify_token(token, self.auth_settings)

    def get_identity_id_from_token(self, token: str | None) -> IdentityId | None:
        """Extract the identity ID without raising.

        Returns:
            Identity ID if the token is valid, None if missing or invalid
        """
        if not token:
            return None

        try:
            return IdentityId(self.verify_token(token).identity_id)
        except JWTError as e:
            # Invalid or expired token, treat as unauthenticated
            logfire.debug("Session token rejected, treating as anonymous", error=str(e))
            return None

    def _nonce_for_bucket(self, action: str, identity_id: IdentityId, bucket: int) -> str:
        message = f"{bucket}|{action}|{identity_id}".encode()
        return hmac.new(
            self.auth_settings.jwt_secret.encode(), message, hashlib.sha256
        ).hexdigest()[:20]

    def _nonce_bucket(self) -> int:
        return self.clock.now() // NONCE_TICK

    def create_nonce(self, action: str, identity_id: IdentityId) -> str:
        """Create a form nonce binding an action to an identity.

        The nonce rotates every ``NONCE_TICK`` seconds.
        """
        return self._nonce_for_bucket(action, identity_id, self._nonce_bucket())

    def verify_nonce(self, nonce: str, action: str, identity_id: IdentityId) -> bool:
        """Check a form nonce from the current or the previous tick."""
        bucket = self._nonce_bucket()
        return any(
            constant_time_equals(self._nonce_for_bucket(action, identity_id, b), nonce)
            for b in (bucket, bucket - 1)
        )
