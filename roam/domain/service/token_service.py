"""Remote-login token domain service."""

import base64
import binascii
import json

import logfire
from pydantic import ValidationError as PydanticValidationError

from roam.domain.error import InvalidTokenError
from roam.domain.value import IdentityId, InvalidTokenReason, SignedTokenPayload, SiteId
from roam.util.clock import Clock
from roam.util.signing import sign, verify

from .base import Service
from .config_service import ConfigService


class TokenService(Service):
    """Mints and verifies short-lived remote-login tokens.

    A token is ``base64(json({"data": payload, "signature": hmac}))``. Decoding
    only proves integrity: expiry and address binding are checked by the
    remote-login flow, which owns the meaning of both.
    """

    def __init__(self, config_service: ConfigService, clock: Clock) -> None:
        """Initialize token service.

        Args:
            config_service: Source of the signing secret
            clock: Time source for the token timestamp
        """
        self.config_service = config_service
        self.clock = clock

    async def generate(self, user_id: IdentityId, site_id: SiteId, ip: str) -> str:
        """Generate a signed token for an identity on a site.

        Args:
            user_id: Identity the token logs in
            site_id: Site the token is meant for
            ip: Source address of the request minting the token

        Returns:
            Opaque token string
        """
        with logfire.span("token_service.generate", user_id=str(user_id), site_id=site_id):
            payload = SignedTokenPayload(
                user_id=user_id, site_id=site_id, timestamp=self.clock.now(), ip=ip
            ).model_dump(mode="json")
            secret = await self.config_service.roaming_secret_key()
            envelope = {"data": payload, "signature": sign(payload, secret)}
            return base64.b64encode(json.dumps(envelope).encode()).decode()

    async def decode(self, token: str) -> SignedTokenPayload:
        """Decode a token and verify its signature.

        Args:
            token: Token produced by ``generate``

        Returns:
            Verified payload

        Raises:
            InvalidTokenError: With reason MALFORMED, STRUCTURE or SIGNATURE_MISMATCH
        """
        try:
            raw = base64.b64decode(token, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidTokenError(InvalidTokenReason.MALFORMED)
        if not raw:
            raise InvalidTokenError(InvalidTokenReason.MALFORMED)

        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError):
            raise InvalidTokenError(InvalidTokenReason.STRUCTURE)

        if (
            not isinstance(parsed, dict)
            or not isinstance(parsed.get("data"), dict)
            or not isinstance(parsed.get("signature"), str)
        ):
            raise InvalidTokenError(InvalidTokenReason.STRUCTURE)

        data = parsed["data"]
        secret = await self.config_service.roaming_secret_key()
        if not verify(data, parsed["signature"], secret):
            logfire.warn("Remote login token signature mismatch")
            raise InvalidTokenError(InvalidTokenReason.SIGNATURE_MISMATCH)

        try:
            return SignedTokenPayload.model_validate(data)
        except PydanticValidationError:
            raise InvalidTokenError(InvalidTokenReason.STRUCTURE)
