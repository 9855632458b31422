"""Unit tests for RoamingSessionManager."""

import json
from urllib.parse import quote, unquote

import pytest

from roam.config import Settings
from roam.domain.service import ConfigService, RoamingSessionManager
from roam.domain.value import RoamingRejection, RoamingState
from roam.util.clock import Clock
from roam.util.signing import sign
from tests.factories import FakeSessionHost, make_identity, seed_identity
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def _issue(manager: RoamingSessionManager, identity) -> str:
    """Issue a cookie for an identity and return its raw value."""
    host = FakeSessionHost()
    await manager.issue_cookie(host, identity)
    return host.cookies[manager.cookie_name]


class TestDomainGate:
    """Tests for the domain compatibility check."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "host,expected",
        [
            ("sub.example.com", True),
            ("example.com", True),
            ("SITE1.Example.COM", True),
            ("other.org", False),
        ],
    )
    async def test_is_domain_compatible(self, unit_env, host, expected):
        """The network domain must occur in the request host."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)

        # Act & Assert
        assert manager.is_domain_compatible(host) is expected

    @pytest.mark.asyncio
    async def test_foreign_host_is_left_alone(self, unit_env):
        """No cookie is read or written outside the network domain."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        session = FakeSessionHost(
            "other.org", cookies={manager.cookie_name: await _issue(manager, admin)}
        )

        # Act
        state = await manager.on_validate_session(session)

        # Assert
        assert state.state == RoamingState.NO_COOKIE
        assert session.events == []
        assert session.deleted == []

    @pytest.mark.asyncio
    async def test_cookie_domain_has_leading_dot(self, unit_env):
        """Roaming cookies are scoped to every subdomain of the network."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        admin = make_identity(1, "admin")
        session = FakeSessionHost()

        # Act
        payload = await manager.issue_cookie(session, admin)

        # Assert
        assert session.set_calls[0]["domain"] == ".example.com"
        assert session.set_calls[0]["expires"] == payload.exp


class TestReadCookie:
    """Tests for cookie decoding."""

    @pytest.mark.asyncio
    async def test_issued_cookie_reads_back_valid(self, unit_env):
        """A fresh cookie carries the identity and a lifetime of roaming_cookie_expiry."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        config_service = await unit_env.get(ConfigService)
        clock = await unit_env.get(Clock)
        admin = make_identity(1, "admin")
        session = FakeSessionHost()
        await manager.issue_cookie(session, admin)

        # Act
        state = await manager.read_cookie(session)

        # Assert
        assert state.is_valid
        assert state.payload.user_id == admin.id
        assert state.payload.iat == clock.now()
        assert state.payload.exp == clock.now() + await config_service.roaming_cookie_expiry()
        assert state.payload.nonce

    @pytest.mark.asyncio
    async def test_cookie_value_is_url_encoded_json_with_sig(self, unit_env):
        """The cookie holds the payload fields plus ``sig``."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        raw = await _issue(manager, make_identity(1, "admin"))

        # Act
        data = json.loads(unquote(raw))

        # Assert
        assert set(data) == {"user_id", "iat", "exp", "nonce", "sig"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,tamper",
        [
            ("user_id", lambda _: str(make_identity(1, "mallory").id)),
            ("iat", lambda v: v - 1),
            ("exp", lambda v: v + 3600),
            ("nonce", lambda v: v + "x"),
        ],
    )
    async def test_tampered_cookie_is_rejected(self, unit_env, field, tamper):
        """Changing any signed field breaks the signature."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        data = json.loads(unquote(await _issue(manager, make_identity(1, "admin"))))
        data[field] = tamper(data[field])
        session = FakeSessionHost(cookies={manager.cookie_name: quote(json.dumps(data))})

        # Act
        state = await manager.read_cookie(session)

        # Assert
        assert state.state == RoamingState.REJECTED
        assert state.reason == RoamingRejection.SIGNATURE_MISMATCH

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        ["not-json", quote("[1]"), quote('{"user_id": "x"}'), quote('{"sig": ""}')],
    )
    async def test_garbage_cookie_is_malformed(self, unit_env, raw):
        """Cookies that are not a signed JSON object are malformed."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost(cookies={manager.cookie_name: raw})

        # Act
        state = await manager.read_cookie(session)

        # Assert
        assert state.reason == RoamingRejection.MALFORMED

    @pytest.mark.asyncio
    async def test_deeply_nested_cookie_is_malformed(self, unit_env):
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost(cookies={manager.cookie_name: quote("[" * 100_000)})

        # Act
        state = await manager.read_cookie(session)

        # Assert
        assert state.reason == RoamingRejection.MALFORMED

    @pytest.mark.asyncio
    async def test_non_ascii_signature_is_rejected_silently(self, unit_env):
        """A planted cookie with a non-ASCII signature is dropped, not raised on."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost(
            cookies={manager.cookie_name: quote('{"sig":"é"}', safe="")}
        )

        # Act
        state = await manager.on_validate_session(session)

        # Assert
        assert state.reason == RoamingRejection.SIGNATURE_MISMATCH
        assert session.deleted == [(manager.cookie_name, ".example.com")]
        assert session.events == []

    @pytest.mark.asyncio
    async def test_signed_cookie_with_missing_fields_is_malformed(self, unit_env):
        """A valid signature over an incomplete payload is still malformed."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        config_service = await unit_env.get(ConfigService)
        data = {"user_id": str(make_identity(1, "admin").id), "iat": 1}
        data["sig"] = sign(data, await config_service.roaming_secret_key())
        session = FakeSessionHost(cookies={manager.cookie_name: quote(json.dumps(data))})

        # Act
        state = await manager.read_cookie(session)

        # Assert
        assert state.reason == RoamingRejection.MALFORMED

    @pytest.mark.asyncio
    async def test_cookie_expires_after_exp(self, unit_env):
        """A cookie is valid at ``exp`` and expired one second later."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        config_service = await unit_env.get(ConfigService)
        clock = await unit_env.get(Clock)
        session = FakeSessionHost()
        await manager.issue_cookie(session, make_identity(1, "admin"))
        lifetime = await config_service.roaming_cookie_expiry()

        # Act
        clock.advance(lifetime)
        at_exp = await manager.read_cookie(session)
        clock.advance(1)
        after_exp = await manager.read_cookie(session)

        # Assert
        assert at_exp.is_valid
        assert after_exp.reason == RoamingRejection.EXPIRED


class TestValidateSession:
    """Tests for the per-request reconciliation."""

    @pytest.mark.asyncio
    async def test_valid_cookie_logs_in_anonymous_request(self, unit_env):
        """A roaming identity arriving on another site is logged in there."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        session = FakeSessionHost(cookies={manager.cookie_name: await _issue(manager, admin)})

        # Act
        state = await manager.on_validate_session(session)

        # Assert
        assert state.is_valid
        assert session.events == [f"login:{admin.id}"]
        assert session.current_identity_id == admin.id

    @pytest.mark.asyncio
    async def test_valid_cookie_takes_over_other_session(self, unit_env):
        """The cookie identity replaces a different local session."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        local = await seed_identity(unit_env, make_identity(2, "alice"))
        session = FakeSessionHost(
            identity_id=local.id,
            cookies={manager.cookie_name: await _issue(manager, admin)},
        )

        # Act
        await manager.on_validate_session(session)

        # Assert
        assert session.events == ["logout", f"login:{admin.id}"]
        assert session.current_identity_id == admin.id

    @pytest.mark.asyncio
    async def test_matching_session_is_untouched(self, unit_env):
        """Nothing happens when the session already belongs to the cookie identity."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        session = FakeSessionHost(
            identity_id=admin.id,
            cookies={manager.cookie_name: await _issue(manager, admin)},
        )

        # Act
        await manager.on_validate_session(session)

        # Assert
        assert session.events == []

    @pytest.mark.asyncio
    async def test_roaming_session_without_cookie_is_logged_out(self, unit_env):
        """A roaming identity cannot keep a session once its cookie is gone."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        session = FakeSessionHost(identity_id=admin.id)

        # Act
        state = await manager.on_validate_session(session)

        # Assert
        assert state.state == RoamingState.NO_COOKIE
        assert session.events == ["logout"]

    @pytest.mark.asyncio
    async def test_non_roaming_session_without_cookie_is_kept(self, unit_env):
        """Ordinary site identities never need a roaming cookie."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        alice = await seed_identity(unit_env, make_identity(2, "alice"))
        session = FakeSessionHost(identity_id=alice.id)

        # Act
        await manager.on_validate_session(session)

        # Assert
        assert session.events == []

    @pytest.mark.asyncio
    async def test_expired_cookie_is_deleted_and_roaming_session_ends(self, unit_env):
        """A stale cookie is removed and its roaming session does not survive it."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        config_service = await unit_env.get(ConfigService)
        clock = await unit_env.get(Clock)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        raw = await _issue(manager, admin)
        clock.advance(await config_service.roaming_cookie_expiry() + 1)
        session = FakeSessionHost(identity_id=admin.id, cookies={manager.cookie_name: raw})

        # Act
        state = await manager.on_validate_session(session)

        # Assert
        assert state.reason == RoamingRejection.EXPIRED
        assert session.deleted == [(manager.cookie_name, ".example.com")]
        assert session.events == ["logout"]

    @pytest.mark.asyncio
    async def test_rejected_cookie_is_deleted(self, unit_env):
        """Unreadable cookies are removed so they are not re-sent."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost(cookies={manager.cookie_name: "garbage"})

        # Act
        await manager.on_validate_session(session)

        # Assert
        assert session.deleted == [(manager.cookie_name, ".example.com")]
        assert session.events == []

    @pytest.mark.asyncio
    async def test_cookie_for_non_roaming_identity_is_ignored(self, unit_env):
        """A validly signed cookie only logs in identities that still roam."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        alice = await seed_identity(unit_env, make_identity(2, "alice"))
        session = FakeSessionHost(cookies={manager.cookie_name: await _issue(manager, alice)})

        # Act
        state = await manager.on_validate_session(session)

        # Assert
        assert state.state == RoamingState.NO_COOKIE
        assert session.events == []
        assert session.deleted == [(manager.cookie_name, ".example.com")]

    @pytest.mark.asyncio
    async def test_logout_in_progress_does_nothing(self, unit_env):
        """While ``action=logout`` is handled the session is left to the logout flow."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        admin = await seed_identity(unit_env, make_identity(1, "admin"))
        other = await seed_identity(unit_env, make_identity(2, "alice"))
        session = FakeSessionHost(
            identity_id=other.id,
            cookies={manager.cookie_name: await _issue(manager, admin)},
            params={"action": "logout"},
        )

        # Act
        state = await manager.on_validate_session(session)

        # Assert
        assert state.state == RoamingState.NO_COOKIE
        assert session.events == []
        assert session.deleted == []


class TestLoginLogout:
    """Tests for the login and logout handlers."""

    @pytest.mark.asyncio
    async def test_login_of_roaming_identity_issues_cookie(self, unit_env):
        """Network administrators get a roaming cookie on login."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost()

        # Act
        await manager.on_login(session, make_identity(1, "admin"))

        # Assert
        assert manager.cookie_name in session.cookies

    @pytest.mark.asyncio
    async def test_login_of_site_identity_issues_nothing(self, unit_env):
        """Identities that do not roam never get a cookie."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost()

        # Act
        await manager.on_login(session, make_identity(2, "alice"))
        await manager.on_login(session, make_identity(2, "admin"))

        # Assert
        assert session.set_calls == []

    @pytest.mark.asyncio
    async def test_logout_deletes_cookie(self, unit_env):
        """Logging out removes the roaming cookie on the network domain."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost()
        await manager.issue_cookie(session, make_identity(1, "admin"))

        # Act
        await manager.on_logout(session)

        # Assert
        assert manager.cookie_name not in session.cookies
        assert session.deleted == [(manager.cookie_name, ".example.com")]


class TestReauthBypass:
    """Tests for skipping reauthentication."""

    @pytest.mark.asyncio
    async def test_logged_in_reauth_redirects(self, unit_env):
        """A logged-in user asked to reauthenticate goes straight to the target."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost(
            identity_id=make_identity(1, "admin").id,
            params={"reauth": "1", "redirect_to": "https://site2.example.com/dashboard"},
        )

        # Act & Assert
        assert manager.maybe_bypass_reauth(session) == "https://site2.example.com/dashboard"

    @pytest.mark.asyncio
    async def test_anonymous_reauth_is_not_bypassed(self, unit_env):
        """Without a session the login form is shown."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost(params={"reauth": "1", "redirect_to": "/dashboard"})

        # Act & Assert
        assert manager.maybe_bypass_reauth(session) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "target,allowed",
        [
            ("/dashboard", True),
            ("https://example.com/", True),
            ("http://deep.site1.example.com/x", True),
            ("https://evil.org/", False),
            ("https://example.com.evil.org/", False),
            ("//evil.org/", False),
            ("javascript:alert(1)", False),
        ],
    )
    async def test_redirect_target_must_stay_in_network(self, unit_env, target, allowed):
        """Only relative targets and hosts of the network are followed."""
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        session = FakeSessionHost(
            identity_id=make_identity(1, "admin").id,
            params={"reauth": "1", "redirect_to": target},
        )

        # Act
        result = manager.maybe_bypass_reauth(session)

        # Assert
        assert (result == target) is allowed


class TestSettings:
    """Tests for settings-derived values."""

    @pytest.mark.asyncio
    async def test_cookie_name_comes_from_settings(self, unit_env):
        # Arrange
        manager = await unit_env.get(RoamingSessionManager)
        settings = await unit_env.get(Settings)

        # Act & Assert
        assert manager.cookie_name == settings.auth.roaming_cookie_name
