"""Tests for the demo-mode session provider and profiles."""

import pytest

from yalla_souq.auth.mock_provider import MockProfileRepository
from yalla_souq.auth.schemas import AuthChangeEvent, AuthUser, SignupData
from yalla_souq.core.exceptions import AuthProviderError


class TestMockSessionProvider:
    """Test cases for MockSessionProvider."""

    @pytest.mark.asyncio
    async def test_valid_demo_login(self, mock_provider, clock):
        session = await mock_provider.sign_in_with_password(" Admin@YallaSouq.ps ", "123456")
        millis = int(clock().timestamp() * 1000)

        assert session.user.email == "admin@yallasouq.ps"
        assert session.user.id == f"mock-user-{millis}"
        assert session.access_token == f"mock-token-{millis}"
        assert session.refresh_token == f"mock-refresh-{millis}"
        assert await mock_provider.get_session() == session

    @pytest.mark.parametrize(
        ("email", "password"),
        [("stranger@yallasouq.ps", "123456"), ("user@yallasouq.ps", "12345")],
    )
    @pytest.mark.asyncio
    async def test_rejected_login(self, mock_provider, email, password):
        with pytest.raises(AuthProviderError) as exc_info:
            await mock_provider.sign_in_with_password(email, password)

        assert exc_info.value.message == "البريد الإلكتروني أو كلمة المرور غير صحيحة"
        assert await mock_provider.get_session() is None

    @pytest.mark.asyncio
    async def test_session_expires_after_an_hour(self, mock_provider, clock):
        await mock_provider.sign_in_with_password("user@yallasouq.ps", "123456")
        clock.advance(hours=1)

        assert await mock_provider.get_session() is None

    @pytest.mark.asyncio
    async def test_events(self, mock_provider):
        events = []

        async def handler(event, session):
            events.append((event, session is not None))

        unsubscribe = mock_provider.on_change(handler)
        await mock_provider.sign_in_with_password("user@yallasouq.ps", "123456")
        await mock_provider.sign_out()
        unsubscribe()
        await mock_provider.sign_in_with_password("user@yallasouq.ps", "123456")

        assert events == [(AuthChangeEvent.SIGNED_IN, True), (AuthChangeEvent.SIGNED_OUT, False)]

    @pytest.mark.asyncio
    async def test_signup_rejects_demo_accounts(self, mock_provider):
        with pytest.raises(AuthProviderError, match="User already registered"):
            await mock_provider.sign_up("test@yallasouq.ps", "123456", {})

    @pytest.mark.asyncio
    async def test_signup_then_verify(self, mock_provider):
        user, session = await mock_provider.sign_up("new@yallasouq.ps", "123456", {"first_name": "ليلى"})

        assert session is None
        assert user.email_confirmed_at is None

        confirmed = await mock_provider.verify_otp(f"mock-otp-{user.id}", "signup")
        assert confirmed.email_confirmed_at is not None
        assert (await mock_provider.get_session()).user.id == user.id

        with pytest.raises(AuthProviderError, match="Token has expired or is invalid"):
            await mock_provider.verify_otp(f"mock-otp-{user.id}", "signup")


class TestMockProfileRepository:
    """Test cases for the synthesized demo profile."""

    @pytest.mark.asyncio
    async def test_demo_profile(self, clock):
        repo = MockProfileRepository(clock)
        profile = await repo.get_profile(AuthUser(id="u1", email="user@yallasouq.ps"))

        assert (profile.first_name, profile.last_name) == ("مستخدم", "تجريبي")
        assert profile.phone == "+970123456789"
        assert profile.account_status == "active"
        assert profile.language == "ar"

    @pytest.mark.asyncio
    async def test_metadata_names_and_updates(self, clock):
        repo = MockProfileRepository(clock)
        user = AuthUser(id="u1", email="a@yallasouq.ps", user_metadata={"first_name": "ليلى"})
        await repo.update_profile("u1", {"bio": "مصممة"})
        profile = await repo.get_profile(user)

        assert profile.first_name == "ليلى"
        assert profile.bio == "مصممة"


class TestDemoModeAuth:
    """The auth manager running over the demo provider."""

    @pytest.mark.asyncio
    async def test_login_and_permissions(self, mock_auth_manager):
        await mock_auth_manager.initialize()
        result = await mock_auth_manager.login("admin@yallasouq.ps", "123456")

        assert result.success is True
        assert mock_auth_manager.get_display_name() == "مستخدم تجريبي"
        assert mock_auth_manager.has_permission("admin_panel") is True
        assert mock_auth_manager.has_permission("post_ad") is True

    @pytest.mark.asyncio
    async def test_failed_demo_logins_count_toward_lockout(self, mock_auth_manager):
        for _ in range(5):
            result = await mock_auth_manager.login("nobody@yallasouq.ps", "123456")

        assert result.error.message == "البريد الإلكتروني أو كلمة المرور غير صحيحة"
        assert mock_auth_manager.is_blocked is True

    @pytest.mark.asyncio
    async def test_signup(self, mock_auth_manager):
        result = await mock_auth_manager.signup(
            SignupData(
                email="new@yallasouq.ps",
                password="123456",
                first_name="ليلى",
                last_name="حداد",
                accept_terms=True,
            )
        )

        assert result.success is True
        assert result.session is None
