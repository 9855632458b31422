"""Unit tests for AccountLinker."""

from urllib.parse import parse_qs, urlsplit
from uuid import uuid4

import pytest

from roam.domain.error import (
    AlreadyLinkedError,
    AuthFailedError,
    InvalidSiteError,
    NotFoundError,
    UnauthorizedError,
)
from roam.domain.repository import IdentityRepository
from roam.domain.service import AccountLinker, ConfigService
from roam.domain.value import IdentityId, RemoteLoginError, SiteId
from roam.util.clock import Clock
from tests.factories import (
    PASSWORD,
    SITE_ONE,
    SITE_TWO,
    FakeSessionHost,
    make_identity,
    seed_identity,
    seed_sites,
)
from tests.harness import create_env_fixture

unit_env = create_env_fixture()

CLIENT_IP = "198.51.100.20"


def _token(login_url: str) -> str:
    return parse_qs(urlsplit(login_url).query)["token"][0]


class TestLinkAccount:
    """Tests for link_account."""

    @pytest.mark.asyncio
    async def test_link_sets_main_id(self, unit_env):
        """Linking stores the primary on the secondary identity."""
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        repository = await unit_env.get(IdentityRepository)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        alice = await seed_identity(unit_env, make_identity(2, "alice"))

        # Act
        account = await linker.link_account(main.id, "https://site1.example.com", "alice", PASSWORD)

        # Assert
        assert account.identity_id == alice.id
        assert account.site_id == SITE_ONE.id
        assert account.site_url == "https://site1.example.com"
        assert (await repository.find_by_id(alice.id)).main_id == main.id

    @pytest.mark.asyncio
    async def test_link_by_email_and_bare_host(self, unit_env):
        """Targets can be named by email and sites by host alone."""
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        alice = await seed_identity(unit_env, make_identity(2, "alice"))

        # Act
        account = await linker.link_account(
            main.id, "site1.example.com", alice.user_email.upper(), PASSWORD
        )

        # Assert
        assert account.identity_id == alice.id

    @pytest.mark.asyncio
    async def test_relinking_to_same_primary_is_idempotent(self, unit_env):
        """Linking twice to the same primary succeeds both times."""
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        await seed_identity(unit_env, make_identity(2, "alice", main_id=main.id))

        # Act
        account = await linker.link_account(main.id, "https://site1.example.com", "alice", PASSWORD)

        # Assert
        assert account.user_login == "alice"

    @pytest.mark.asyncio
    async def test_linked_to_other_primary_is_rejected(self, unit_env):
        """An identity belongs to at most one primary."""
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        repository = await unit_env.get(IdentityRepository)
        first = await seed_identity(unit_env, make_identity(1, "first"))
        second = await seed_identity(unit_env, make_identity(1, "second"))
        alice = await seed_identity(unit_env, make_identity(2, "alice", main_id=first.id))

        # Act & Assert
        with pytest.raises(AlreadyLinkedError):
            await linker.link_account(second.id, "https://site1.example.com", "alice", PASSWORD)
        assert (await repository.find_by_id(alice.id)).main_id == first.id

    @pytest.mark.asyncio
    async def test_wrong_password_fails(self, unit_env):
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        await seed_identity(unit_env, make_identity(2, "alice"))

        # Act & Assert
        with pytest.raises(AuthFailedError):
            await linker.link_account(main.id, "https://site1.example.com", "alice", "nope")

    @pytest.mark.asyncio
    async def test_unknown_site_fails(self, unit_env):
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))

        # Act & Assert
        with pytest.raises(InvalidSiteError, match="Invalid subsite URL."):
            await linker.link_account(main.id, "https://nowhere.example.com", "alice", PASSWORD)

    @pytest.mark.asyncio
    async def test_roaming_identity_is_not_found_through_fallback(self, unit_env):
        """Only identities stored on the named site can be linked."""
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        await seed_identity(unit_env, make_identity(1, "admin"))

        # Act & Assert
        with pytest.raises(AuthFailedError):
            await linker.link_account(main.id, "https://site1.example.com", "admin", PASSWORD)


class TestUnlinkAccount:
    """Tests for unlink_account."""

    @pytest.mark.asyncio
    async def test_primary_can_unlink(self, unit_env):
        # Arrange
        linker = await unit_env.get(AccountLinker)
        repository = await unit_env.get(IdentityRepository)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        alice = await seed_identity(unit_env, make_identity(2, "alice", main_id=main.id))

        # Act
        await linker.unlink_account(alice.id, main, SiteId(1))

        # Assert
        assert (await repository.find_by_id(alice.id)).main_id is None

    @pytest.mark.asyncio
    async def test_stranger_cannot_unlink(self, unit_env):
        # Arrange
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        stranger = await seed_identity(unit_env, make_identity(2, "mallory"))
        alice = await seed_identity(unit_env, make_identity(2, "alice", main_id=main.id))

        # Act & Assert
        with pytest.raises(UnauthorizedError, match="Unauthorized unlink attempt."):
            await linker.unlink_account(alice.id, stranger, SiteId(2))

    @pytest.mark.asyncio
    async def test_network_admin_on_root_can_unlink(self, unit_env):
        # Arrange
        linker = await unit_env.get(AccountLinker)
        repository = await unit_env.get(IdentityRepository)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        main = await seed_identity(unit_env, make_identity(1, "main"))
        alice = await seed_identity(unit_env, make_identity(2, "alice", main_id=main.id))

        # Act
        await linker.unlink_account(alice.id, admin, SiteId(1))

        # Assert
        assert (await repository.find_by_id(alice.id)).main_id is None

    @pytest.mark.asyncio
    async def test_network_admin_off_root_cannot_unlink(self, unit_env):
        """Network-wide rights only apply while acting on the root site."""
        # Arrange
        linker = await unit_env.get(AccountLinker)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        main = await seed_identity(unit_env, make_identity(1, "main"))
        alice = await seed_identity(unit_env, make_identity(2, "alice", main_id=main.id))

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await linker.unlink_account(alice.id, admin, SiteId(2))

    @pytest.mark.asyncio
    async def test_unknown_target_checks_authorization_first(self, unit_env):
        """Strangers learn nothing about which identities exist."""
        # Arrange
        linker = await unit_env.get(AccountLinker)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        stranger = await seed_identity(unit_env, make_identity(2, "mallory"))
        missing = IdentityId(uuid4())

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await linker.unlink_account(missing, stranger, SiteId(2))
        with pytest.raises(NotFoundError):
            await linker.unlink_account(missing, admin, SiteId(1))


class TestGetLinkedAccounts:
    """Tests for the cached linked-account list."""

    @pytest.mark.asyncio
    async def test_lists_linked_identities_outside_root(self, unit_env):
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        await seed_identity(unit_env, make_identity(1, "root-alias", main_id=main.id))
        await seed_identity(unit_env, make_identity(2, "alice", main_id=main.id))
        await seed_identity(unit_env, make_identity(3, "alice2", main_id=main.id))
        await seed_identity(unit_env, make_identity(3, "bob"))

        # Act
        accounts = await linker.get_linked_accounts(main.id)

        # Assert
        assert [(a.site_id, a.user_login) for a in accounts] == [(2, "alice"), (3, "alice2")]
        assert accounts[1].site_url == SITE_TWO.url

    @pytest.mark.asyncio
    async def test_list_is_cached_until_expiry(self, unit_env):
        """Changes made behind the linker's back show up after cache_expiry."""
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        config_service = await unit_env.get(ConfigService)
        clock = await unit_env.get(Clock)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        assert await linker.get_linked_accounts(main.id) == []

        # Act
        await seed_identity(unit_env, make_identity(2, "alice", main_id=main.id))
        cached = await linker.get_linked_accounts(main.id)
        clock.advance(await config_service.cache_expiry())
        fresh = await linker.get_linked_accounts(main.id)

        # Assert
        assert cached == []
        assert [a.user_login for a in fresh] == ["alice"]

    @pytest.mark.asyncio
    async def test_link_and_unlink_invalidate_list(self, unit_env):
        # Arrange
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        alice = await seed_identity(unit_env, make_identity(2, "alice"))
        assert await linker.get_linked_accounts(main.id) == []

        # Act
        await linker.link_account(main.id, "https://site1.example.com", "alice", PASSWORD)
        after_link = await linker.get_linked_accounts(main.id)
        await linker.unlink_account(alice.id, main, SiteId(1))
        after_unlink = await linker.get_linked_accounts(main.id)

        # Assert
        assert [a.identity_id for a in after_link] == [alice.id]
        assert after_unlink == []


class TestRemoteLogin:
    """Tests for generate_login_url and remote_login."""

    async def _setup(self, unit_env):
        await seed_sites(unit_env)
        linker = await unit_env.get(AccountLinker)
        main = await seed_identity(unit_env, make_identity(1, "main"))
        alice = await seed_identity(unit_env, make_identity(2, "alice", main_id=main.id))
        return linker, alice

    @pytest.mark.asyncio
    async def test_login_url_points_at_site(self, unit_env):
        # Arrange
        linker, alice = await self._setup(unit_env)

        # Act
        url = await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP)

        # Assert
        assert url.startswith("https://site1.example.com/login?action=remote_login&token=")

    @pytest.mark.asyncio
    async def test_login_url_for_unknown_site_fails(self, unit_env):
        # Arrange
        linker, alice = await self._setup(unit_env)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await linker.generate_login_url(alice.id, SiteId(99), CLIENT_IP)

    @pytest.mark.asyncio
    async def test_valid_token_logs_in(self, unit_env):
        # Arrange
        linker, alice = await self._setup(unit_env)
        token = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))
        session = FakeSessionHost()

        # Act
        outcome = await linker.remote_login(token, CLIENT_IP, SITE_ONE, session)

        # Assert
        assert outcome.succeeded
        assert outcome.identity_id == alice.id
        assert outcome.redirect_url == "https://site1.example.com/"
        assert session.current_identity_id == alice.id

    @pytest.mark.asyncio
    async def test_garbage_token_is_invalid(self, unit_env):
        # Arrange
        linker, _ = await self._setup(unit_env)
        session = FakeSessionHost()

        # Act
        outcome = await linker.remote_login("garbage", CLIENT_IP, SITE_ONE, session)

        # Assert
        assert outcome.error == RemoteLoginError.INVALID_TOKEN
        assert outcome.redirect_url == "https://site1.example.com/?error=invalid_token"
        assert session.events == []

    @pytest.mark.asyncio
    async def test_other_address_is_ip_mismatch(self, unit_env):
        # Arrange
        linker, alice = await self._setup(unit_env)
        token = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))

        # Act
        outcome = await linker.remote_login(token, "192.0.2.1", SITE_ONE, FakeSessionHost())

        # Assert
        assert outcome.error == RemoteLoginError.IP_MISMATCH

    @pytest.mark.asyncio
    async def test_token_valid_at_expiry_and_expired_after(self, unit_env):
        """A token exactly remote_login_token_expiry old still works."""
        # Arrange
        linker, alice = await self._setup(unit_env)
        config_service = await unit_env.get(ConfigService)
        clock = await unit_env.get(Clock)
        expiry = await config_service.remote_login_token_expiry()
        first = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))
        second = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))

        # Act
        clock.advance(expiry)
        at_expiry = await linker.remote_login(first, CLIENT_IP, SITE_ONE, FakeSessionHost())
        clock.advance(1)
        after_expiry = await linker.remote_login(second, CLIENT_IP, SITE_ONE, FakeSessionHost())

        # Assert
        assert at_expiry.succeeded
        assert after_expiry.error == RemoteLoginError.TOKEN_EXPIRED
        assert after_expiry.redirect_url.endswith("?error=token_expired")

    @pytest.mark.asyncio
    async def test_attempt_after_max_is_rate_limited(self, unit_env):
        """Attempt rate_limit_max + 1 within the window is refused; the next window allows it."""
        # Arrange
        linker, alice = await self._setup(unit_env)
        config_service = await unit_env.get(ConfigService)
        clock = await unit_env.get(Clock)
        limit = await config_service.rate_limit_max()
        wait = await config_service.rate_limit_wait()
        token = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))

        # Act
        outcomes = [
            await linker.remote_login(token, CLIENT_IP, SITE_ONE, FakeSessionHost())
            for _ in range(limit + 1)
        ]
        clock.advance(wait)
        fresh = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))
        after_window = await linker.remote_login(fresh, CLIENT_IP, SITE_ONE, FakeSessionHost())

        # Assert
        assert all(o.succeeded for o in outcomes[:limit])
        assert outcomes[limit].error == RemoteLoginError.RATE_LIMITED
        assert after_window.succeeded

    @pytest.mark.asyncio
    async def test_token_reuse_within_window_is_accepted(self, unit_env):
        """Tokens are not single-use; replay is bounded only by age, address and rate limit."""
        # Arrange
        linker, alice = await self._setup(unit_env)
        token = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))

        # Act
        first = await linker.remote_login(token, CLIENT_IP, SITE_ONE, FakeSessionHost())
        second = await linker.remote_login(token, CLIENT_IP, SITE_ONE, FakeSessionHost())

        # Assert
        assert first.succeeded
        assert second.succeeded

    @pytest.mark.asyncio
    async def test_rejections_before_rate_limit_are_not_counted(self, unit_env):
        """Address and age failures end the request before the limiter counts it."""
        # Arrange
        linker, alice = await self._setup(unit_env)
        config_service = await unit_env.get(ConfigService)
        limit = await config_service.rate_limit_max()
        token = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))

        # Act
        for _ in range(limit * 2):
            await linker.remote_login(token, "192.0.2.1", SITE_ONE, FakeSessionHost())
        outcome = await linker.remote_login(token, CLIENT_IP, SITE_ONE, FakeSessionHost())

        # Assert
        assert outcome.succeeded

    @pytest.mark.asyncio
    async def test_identity_of_other_site_is_not_found(self, unit_env):
        """A token only logs in on the site its identity belongs to."""
        # Arrange
        linker, alice = await self._setup(unit_env)
        token = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))

        # Act
        outcome = await linker.remote_login(token, CLIENT_IP, SITE_TWO, FakeSessionHost())

        # Assert
        assert outcome.error == RemoteLoginError.USER_NOT_FOUND
        assert outcome.redirect_url == "https://site2.example.com/?error=user_not_found"

    @pytest.mark.asyncio
    async def test_unknown_site_redirects_to_root_path(self, unit_env):
        # Arrange
        linker, alice = await self._setup(unit_env)
        token = _token(await linker.generate_login_url(alice.id, SITE_ONE.id, CLIENT_IP))

        # Act
        outcome = await linker.remote_login(token, CLIENT_IP, None, FakeSessionHost())

        # Assert
        assert outcome.redirect_url == "/?error=user_not_found"

    @pytest.mark.asyncio
    async def test_roaming_identity_logs_in_on_any_site(self, unit_env):
        """Root-site roaming identities are accepted on every tenant site."""
        # Arrange
        linker, _ = await self._setup(unit_env)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        token = _token(await linker.generate_login_url(admin.id, SITE_TWO.id, CLIENT_IP))

        # Act
        outcome = await linker.remote_login(token, CLIENT_IP, SITE_TWO, FakeSessionHost())

        # Assert
        assert outcome.identity_id == admin.id
