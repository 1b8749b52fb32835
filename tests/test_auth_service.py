"""
Storefront API — Auth Service Unit Tests
==========================================

What:  Tests for token issue/verify/revoke, the session registry and login.
How:   Real JWTs signed with a test key; the user lookup is patched out.

What we test:
    ✅ An issued token verifies back to the same user
    ✅ Missing, malformed, tampered and expired tokens are rejected
    ✅ Expiry follows the injected clock, not wall-clock time
    ✅ Logout invalidates a token that is still signed and unexpired
    ✅ Login gives one message for unknown user and wrong password
    ✅ Passwords are hashed, never stored in plain text
"""

from unittest.mock import AsyncMock, patch

import pytest

from storefront.exceptions import InvalidCredentialsError, UnauthorizedError
from storefront.models.user import User
from storefront.services.auth_service import AuthService, SessionRegistry
from storefront.services.passwords import hash_password, verify_password

SECRET = "unit-test-secret"


def _user(user_id=1, username="alice", password="s3cret"):
    return User(user_id=user_id, username=username, password_hash=hash_password(password))


class TestSessionRegistry:

    def test_open_then_get(self, clock):
        registry = SessionRegistry(clock=clock)
        session = registry.open(subject="1", username="alice", ttl_seconds=60)

        assert registry.get(session.session_id) == session
        assert session.expires_at == session.issued_at + 60

    def test_expired_session_is_dropped(self, clock):
        registry = SessionRegistry(clock=clock)
        session = registry.open(subject="1", username="alice", ttl_seconds=60)
        clock.advance(60)

        assert registry.get(session.session_id) is None
        assert len(registry) == 0

    def test_revoke(self, clock):
        registry = SessionRegistry(clock=clock)
        session = registry.open(subject="1", username="alice", ttl_seconds=60)

        assert registry.revoke(session.session_id) is True
        assert registry.revoke(session.session_id) is False
        assert registry.get(session.session_id) is None

    def test_open_sweeps_expired_sessions(self, clock):
        registry = SessionRegistry(clock=clock)
        registry.open(subject="1", username="alice", ttl_seconds=10)
        clock.advance(11)
        registry.open(subject="2", username="bob", ttl_seconds=10)

        assert len(registry) == 1


class TestTokens:
    """issue → verify → revoke."""

    def setup_method(self):
        self.service = AuthService(secret_key=SECRET, token_ttl=3600)

    def test_issued_token_verifies(self):
        issued = self.service.issue(_user())

        user = self.service.verify(issued.token)

        assert user.user_id == 1
        assert user.username == "alice"
        assert user.session_id == issued.session.session_id

    def test_each_login_gets_its_own_session(self):
        first = self.service.issue(_user())
        second = self.service.issue(_user())

        assert first.token != second.token
        assert first.session.session_id != second.session.session_id

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, token):
        with pytest.raises(UnauthorizedError) as exc_info:
            self.service.verify(token)
        assert exc_info.value.reason == "missing_token"

    def test_malformed_token(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            self.service.verify("not-a-jwt")
        assert exc_info.value.reason == "invalid_token"

    def test_token_signed_with_other_key(self):
        forged = AuthService(secret_key="someone-else").issue(_user()).token

        with pytest.raises(UnauthorizedError) as exc_info:
            self.service.verify(forged)
        assert exc_info.value.reason == "invalid_token"

    def test_tampered_payload(self):
        token = self.service.issue(_user()).token
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}x.{signature}"

        with pytest.raises(UnauthorizedError):
            self.service.verify(tampered)

    def test_expired_token(self):
        service = AuthService(secret_key=SECRET, token_ttl=-10)
        token = service.issue(_user()).token

        with pytest.raises(UnauthorizedError) as exc_info:
            service.verify(token)
        assert exc_info.value.reason == "expired_token"

    def test_service_clock_decides_expiry(self, clock):
        # Far in the past: wall-clock time would call every token expired
        clock.now = 1_000_000.0
        service = AuthService(secret_key=SECRET, token_ttl=3600, clock=clock)
        token = service.issue(_user()).token

        assert service.verify(token).username == "alice"

        clock.advance(3599)
        assert service.verify(token).username == "alice"

        clock.advance(1)
        with pytest.raises(UnauthorizedError) as exc_info:
            service.verify(token)
        assert exc_info.value.reason == "expired_token"

    def test_exp_claim_does_not_lapse_before_session(self, clock):
        clock.now = 1_000_000.25
        service = AuthService(secret_key=SECRET, token_ttl=3600, clock=clock)
        issued = service.issue(_user())
        clock.advance(3599.9)

        assert service.verify(issued.token).session_id == issued.session.session_id

    def test_session_expiry_rejects_token(self, clock):
        clock.now = 1_000_000.25
        registry = SessionRegistry(clock=clock)
        service = AuthService(secret_key=SECRET, token_ttl=3600, registry=registry, clock=clock)
        token = service.issue(_user()).token
        clock.advance(3600)  # session gone, exp claim (rounded up) not yet

        with pytest.raises(UnauthorizedError) as exc_info:
            service.verify(token)
        assert exc_info.value.reason == "inactive_session"

    def test_logout_invalidates_token(self):
        token = self.service.issue(_user()).token

        self.service.logout(token)

        with pytest.raises(UnauthorizedError) as exc_info:
            self.service.verify(token)
        assert exc_info.value.reason == "inactive_session"

    def test_logout_only_ends_its_own_session(self):
        first = self.service.issue(_user()).token
        second = self.service.issue(_user()).token

        self.service.logout(first)

        assert self.service.verify(second).username == "alice"

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_logout_without_live_session_is_noop(self, token):
        self.service.logout(token)

    def test_token_from_other_service_has_no_session(self):
        # Same key, different registry: signature is fine but no session exists
        other = AuthService(secret_key=SECRET)
        token = other.issue(_user()).token

        with pytest.raises(UnauthorizedError) as exc_info:
            self.service.verify(token)
        assert exc_info.value.reason == "inactive_session"


class TestLogin:

    def setup_method(self):
        self.service = AuthService(secret_key=SECRET)

    @pytest.mark.asyncio
    async def test_login_success(self, mock_db_session):
        with patch("storefront.services.auth_service.user_service") as mock_users:
            mock_users.get_by_username = AsyncMock(return_value=_user())

            issued = await self.service.login(mock_db_session, "alice", "s3cret")

        assert self.service.verify(issued.token).username == "alice"

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db_session):
        with patch("storefront.services.auth_service.user_service") as mock_users:
            mock_users.get_by_username = AsyncMock(return_value=_user())

            with pytest.raises(InvalidCredentialsError) as exc_info:
                await self.service.login(mock_db_session, "alice", "wrong")

        assert exc_info.value.message == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_unknown_user_same_message(self, mock_db_session):
        with patch("storefront.services.auth_service.user_service") as mock_users:
            mock_users.get_by_username = AsyncMock(return_value=None)

            with pytest.raises(InvalidCredentialsError) as exc_info:
                await self.service.login(mock_db_session, "nobody", "s3cret")

        assert exc_info.value.message == "Invalid username or password"
        assert len(self.service.registry) == 0


class TestPasswords:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("s3cret")

        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_missing_or_corrupt_hash(self):
        assert verify_password("s3cret", None) is False
        assert verify_password("s3cret", "not-a-hash") is False
