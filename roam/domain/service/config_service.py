"""Network configuration domain service."""

import secrets

import logfire

from roam.config import NetworkOptionDefaults
from roam.domain.error import ValidationError
from roam.domain.repository import Cache, NetworkOptionsRepository
from roam.domain.value import NetworkOption

from .base import Service

# The cache expiry itself is cached for a fixed hour.
CACHE_EXPIRY_TTL = 3600


class ConfigService(Service):
    """Reads and updates tenant-wide options.

    Values come from the options store and are cached in the keyed cache, so a
    change made on one site becomes visible everywhere once the cached copy
    lapses or is invalidated.
    """

    def __init__(
        self,
        options_repository: NetworkOptionsRepository,
        cache: Cache,
        defaults: NetworkOptionDefaults,
    ) -> None:
        """Initialize config service.

        Args:
            options_repository: Options store
            cache: Keyed cache
            defaults: Values used for options never saved
        """
        self.options_repository = options_repository
        self.cache = cache
        self.defaults = defaults

    @staticmethod
    def _cache_key(option: NetworkOption) -> str:
        return f"option:{option.value}"

    async def _get(self, option: NetworkOption, ttl: int | None = None) -> str:
        key = self._cache_key(option)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        stored = await self.options_repository.get(option)
        value = stored if stored is not None else str(getattr(self.defaults, option.value))
        if ttl is None:
            ttl = await self.cache_expiry()
        await self.cache.set(key, value, ttl)
        return value

    async def _get_int(self, option: NetworkOption) -> int:
        return int(await self._get(option))

    async def cache_expiry(self) -> int:
        """Seconds cached option values and linked-account lists live."""
        return int(await self._get(NetworkOption.CACHE_EXPIRY, ttl=CACHE_EXPIRY_TTL))

    async def roaming_cookie_expiry(self) -> int:
        """Lifetime of a roaming cookie in seconds."""
        return await self._get_int(NetworkOption.ROAMING_COOKIE_EXPIRY)

    async def remote_login_token_expiry(self) -> int:
        """Maximum age of a remote-login token in seconds."""
        return await self._get_int(NetworkOption.REMOTE_LOGIN_TOKEN_EXPIRY)

    async def rate_limit_max(self) -> int:
        """Remote-login attempts allowed per identity within one window."""
        return await self._get_int(NetworkOption.RATE_LIMIT_MAX)

    async def rate_limit_wait(self) -> int:
        """Length of the remote-login rate-limit window in seconds."""
        return await self._get_int(NetworkOption.RATE_LIMIT_WAIT)

    async def roaming_secret_key(self) -> str:
        """Network signing secret for tokens and roaming cookies."""
        return await self._get(NetworkOption.ROAMING_SECRET_KEY)

    async def uses_default_secret(self) -> bool:
        """Whether the signing secret still has its shipped default value."""
        return await self.roaming_secret_key() == self.defaults.roaming_secret_key

    async def get_options(self) -> dict[NetworkOption, int]:
        """Current values of every numeric option."""
        return {
            option: await self._get_int(option)
            for option in NetworkOption
            if option.bounds is not None
        }

    async def update_options(self, values: dict[NetworkOption, int]) -> None:
        """Validate and store numeric options.

        Nothing is written unless every value is within its range.

        Args:
            values: New option values

        Raises:
            ValidationError: If an option is unknown, not numeric or out of range
        """
        with logfire.span("config_service.update_options", options=len(values)):
            for option, value in values.items():
                bounds = option.bounds
                if bounds is None:
                    raise ValidationError(f"{option.value} is not a numeric option")
                low, high = bounds
                if not low <= value <= high:
                    raise ValidationError(
                        f"{option.value} must be between {low} and {high}"
                    )

            for option, value in values.items():
                await self.options_repository.set(option, str(value))
                await self.cache.delete(self._cache_key(option))

            logfire.info(
                "Network options updated", options=[o.value for o in values]
            )

    async def rotate_secret_key(self) -> None:
        """Replace the signing secret with a freshly generated one.

        Every outstanding roaming cookie and remote-login token stops
        validating immediately.
        """
        with logfire.span("config_service.rotate_secret_key"):
            await self.options_repository.set(
                NetworkOption.ROAMING_SECRET_KEY, secrets.token_urlsafe(48)
            )
            await self.cache.delete(self._cache_key(NetworkOption.ROAMING_SECRET_KEY))
            logfire.warn("Roaming secret key rotated")
