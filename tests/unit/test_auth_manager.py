"""Tests for the auth state manager."""

import pytest

from yalla_souq.auth.errors import get_error_message
from yalla_souq.auth.schemas import SignupData
from yalla_souq.auth.storage import LAST_LOGIN_KEY, REMEMBER_EMAIL_KEY
from yalla_souq.core.exceptions import AuthProviderError

BAD_CREDENTIALS = AuthProviderError("Invalid login credentials", status_code=400)


def _signup_data(**overrides) -> SignupData:
    data = {
        "email": " New@YallaSouq.ps ",
        "password": "secret1",
        "first_name": " سامي ",
        "last_name": "خليل",
        "phone": "0599123456",
        "accept_terms": True,
        "receive_newsletter": True,
    }
    data.update(overrides)
    return SignupData(**data)


class TestInitialize:
    """Test cases for session restoration."""

    @pytest.mark.asyncio
    async def test_anonymous(self, auth_manager):
        state = await auth_manager.initialize()

        assert state.is_loading is False
        assert state.is_authenticated is False
        assert state.user is None

    @pytest.mark.asyncio
    async def test_existing_session_loads_profile(self, auth_manager, fake_provider):
        fake_provider.session = fake_provider.make_session()
        state = await auth_manager.initialize()

        assert state.is_authenticated is True
        assert state.user.first_name == "سامي"
        assert LAST_LOGIN_KEY in auth_manager.storage

    @pytest.mark.asyncio
    async def test_profile_failure(self, auth_manager, fake_provider, profiles):
        fake_provider.session = fake_provider.make_session()
        profiles.fail_get = True
        state = await auth_manager.initialize()

        assert state.is_authenticated is False
        assert state.error == "فشل في تحميل بيانات المستخدم"

    @pytest.mark.asyncio
    async def test_provider_error_is_translated(self, auth_manager, fake_provider):
        fake_provider.get_session_error = AuthProviderError("Network error")
        state = await auth_manager.initialize()

        assert state.error == "خطأ في الاتصال، تحقق من الإنترنت"

    @pytest.mark.asyncio
    async def test_unexpected_error(self, auth_manager, fake_provider):
        fake_provider.get_session_error = RuntimeError("boom")
        state = await auth_manager.initialize()

        assert state.error == "فشل في تهيئة نظام المصادقة"

    @pytest.mark.asyncio
    async def test_close_unsubscribes(self, auth_manager, fake_provider):
        await auth_manager.initialize()
        await auth_manager.close()

        assert fake_provider._handlers == []


class TestLogin:
    """Test cases for login and lockout."""

    @pytest.mark.asyncio
    async def test_success_normalizes_email(self, auth_manager, fake_provider):
        await auth_manager.initialize()
        result = await auth_manager.login("  User@YallaSouq.PS ", "secret1")

        assert result.success is True
        assert fake_provider.calls[0] == ("sign_in", "user@yallasouq.ps", "secret1")
        assert auth_manager.is_authenticated is True
        assert auth_manager.user.email == "user@yallasouq.ps"

    @pytest.mark.asyncio
    async def test_success_without_change_events(self, auth_manager):
        """A provider that emits no events still yields a loaded user."""
        result = await auth_manager.login("user@yallasouq.ps", "secret1")

        assert result.success is True
        assert auth_manager.user is not None

    @pytest.mark.asyncio
    async def test_remember_me(self, auth_manager):
        await auth_manager.login("user@yallasouq.ps", "secret1", remember_me=True)
        assert auth_manager.storage.get_item(REMEMBER_EMAIL_KEY) == "user@yallasouq.ps"

        await auth_manager.login("user@yallasouq.ps", "secret1", remember_me=False)
        assert auth_manager.storage.get_item(REMEMBER_EMAIL_KEY) is None

    @pytest.mark.asyncio
    async def test_failure_is_translated(self, auth_manager, fake_provider):
        fake_provider.sign_in_error = BAD_CREDENTIALS
        result = await auth_manager.login("user@yallasouq.ps", "wrong")

        assert result.success is False
        assert result.error.message == "بيانات تسجيل الدخول غير صحيحة"
        assert result.error.code == "Invalid login credentials"
        assert auth_manager.error == "بيانات تسجيل الدخول غير صحيحة"
        assert auth_manager.login_attempts == 1

    @pytest.mark.asyncio
    async def test_blocks_after_five_failures(self, auth_manager, fake_provider):
        fake_provider.sign_in_error = BAD_CREDENTIALS
        for _ in range(5):
            await auth_manager.login("user@yallasouq.ps", "wrong")

        assert auth_manager.is_blocked is True

        fake_provider.sign_in_error = None
        result = await auth_manager.login("user@yallasouq.ps", "secret1")

        assert result.success is False
        assert result.error.message == "تم حظر المحاولات لمدة مؤقتة، يرجى المحاولة لاحقاً"
        assert len(fake_provider.calls) == 5

    @pytest.mark.asyncio
    async def test_block_lifts_after_fifteen_minutes(self, auth_manager, fake_provider, clock):
        fake_provider.sign_in_error = BAD_CREDENTIALS
        for _ in range(5):
            await auth_manager.login("user@yallasouq.ps", "wrong")

        clock.advance(minutes=14, seconds=59)
        assert auth_manager.is_blocked is True

        clock.advance(seconds=1)
        assert auth_manager.is_blocked is False
        assert auth_manager.login_attempts == 0

        fake_provider.sign_in_error = None
        result = await auth_manager.login("user@yallasouq.ps", "secret1")
        assert result.success is True

    @pytest.mark.asyncio
    async def test_success_resets_attempts(self, auth_manager, fake_provider):
        fake_provider.sign_in_error = BAD_CREDENTIALS
        for _ in range(3):
            await auth_manager.login("user@yallasouq.ps", "wrong")

        fake_provider.sign_in_error = None
        await auth_manager.login("user@yallasouq.ps", "secret1")

        assert auth_manager.login_attempts == 0

    @pytest.mark.asyncio
    async def test_unexpected_error(self, auth_manager, fake_provider):
        fake_provider.sign_in_error = RuntimeError("socket closed")
        result = await auth_manager.login("user@yallasouq.ps", "secret1")

        assert result.error.message == "حدث خطأ غير متوقع أثناء تسجيل الدخول"
        assert auth_manager.login_attempts == 0


class TestSignup:
    """Test cases for signup."""

    @pytest.mark.asyncio
    async def test_terms_required(self, auth_manager, fake_provider):
        result = await auth_manager.signup(_signup_data(accept_terms=False))

        assert result.success is False
        assert result.error.message == "يجب قبول الشروط والأحكام للمتابعة"
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_success_applies_profile_defaults(self, auth_manager, fake_provider, profiles):
        result = await auth_manager.signup(_signup_data())

        assert result.success is True
        _, email, metadata = fake_provider.calls[0]
        assert email == "new@yallasouq.ps"
        assert metadata == {
            "first_name": "سامي",
            "last_name": "خليل",
            "phone": "0599123456",
            "marketing_emails": True,
        }
        assert profiles.updates == [
            (
                "new-user",
                {
                    "email_notifications": True,
                    "sms_notifications": True,
                    "marketing_emails": True,
                    "profile_visibility": "public",
                    "language": "ar",
                    "account_status": "active",
                },
            )
        ]

    @pytest.mark.asyncio
    async def test_sms_off_without_phone(self, auth_manager, profiles):
        await auth_manager.signup(_signup_data(phone="  "))

        assert profiles.updates[0][1]["sms_notifications"] is False

    @pytest.mark.asyncio
    async def test_profile_update_failure_is_ignored(self, auth_manager, profiles, app_logger):
        profiles.fail_update = True
        result = await auth_manager.signup(_signup_data())

        assert result.success is True
        assert any(entry.message == "Profile update error" for entry in app_logger.get_recent_logs(20))

    @pytest.mark.asyncio
    async def test_provider_error(self, auth_manager, fake_provider):
        fake_provider.sign_up_error = AuthProviderError("User already registered", status_code=422)
        result = await auth_manager.signup(_signup_data())

        assert result.error.message == "هذا البريد الإلكتروني مسجل مسبقاً"

    @pytest.mark.asyncio
    async def test_unmapped_error_passes_through(self, auth_manager, fake_provider):
        fake_provider.sign_up_error = AuthProviderError("Signups not allowed for this instance")
        result = await auth_manager.signup(_signup_data())

        assert result.error.message == "Signups not allowed for this instance"


class TestSessionOperations:
    """Test cases for logout, profile updates and password reset."""

    @pytest.mark.asyncio
    async def test_logout_clears_session(self, auth_manager):
        await auth_manager.initialize()
        await auth_manager.login("user@yallasouq.ps", "secret1", remember_me=True)
        await auth_manager.logout()

        assert auth_manager.is_authenticated is False
        assert auth_manager.storage.get_item(LAST_LOGIN_KEY) is None

    @pytest.mark.asyncio
    async def test_signed_out_event_clears_storage(self, auth_manager, fake_provider):
        await auth_manager.initialize()
        await auth_manager.login("user@yallasouq.ps", "secret1", remember_me=True)
        await fake_provider.sign_out()

        assert auth_manager.user is None
        assert auth_manager.storage.get_item(REMEMBER_EMAIL_KEY) is None

    @pytest.mark.asyncio
    async def test_logout_without_events_keeps_remembered_email(self, auth_manager):
        await auth_manager.login("user@yallasouq.ps", "secret1", remember_me=True)
        await auth_manager.logout()

        assert auth_manager.storage.get_item(REMEMBER_EMAIL_KEY) == "user@yallasouq.ps"
        assert auth_manager.storage.get_item(LAST_LOGIN_KEY) is None

    @pytest.mark.asyncio
    async def test_update_profile_requires_login(self, auth_manager):
        result = await auth_manager.update_profile({"bio": "مرحبا"})

        assert result.error.message == "لم يتم تسجيل الدخول"

    @pytest.mark.asyncio
    async def test_update_profile_merges(self, auth_manager, profiles, clock):
        await auth_manager.login("user@yallasouq.ps", "secret1")
        result = await auth_manager.update_profile({"bio": "بائع موثوق", "address_city": "نابلس"})

        assert result.success is True
        assert auth_manager.user.bio == "بائع موثوق"
        assert auth_manager.user.address_city == "نابلس"
        user_id, payload = profiles.updates[-1]
        assert payload["updated_at"] == clock().isoformat()

    @pytest.mark.asyncio
    async def test_update_profile_failure(self, auth_manager, profiles):
        await auth_manager.login("user@yallasouq.ps", "secret1")
        profiles.fail_update = True
        result = await auth_manager.update_profile({"bio": "x"})

        assert result.success is False
        assert auth_manager.user.bio is None

    @pytest.mark.asyncio
    async def test_reset_password_redirect(self, auth_manager, fake_provider):
        result = await auth_manager.reset_password("user@yallasouq.ps")

        assert result.success is True
        assert fake_provider.calls[-1] == (
            "reset",
            "user@yallasouq.ps",
            "http://localhost:3000/auth/reset-password",
        )

    @pytest.mark.asyncio
    async def test_verify_email(self, auth_manager):
        ok = await auth_manager.verify_email("valid-hash", "signup")
        bad = await auth_manager.verify_email("stale", "signup")

        assert ok.success is True
        assert bad.success is False
        assert bad.error.message == "Token has expired or is invalid"


class TestPermissions:
    """Test cases for permissions and display names."""

    @pytest.mark.asyncio
    async def test_anonymous_has_no_permissions(self, auth_manager):
        assert auth_manager.has_permission("post_ad") is False
        assert auth_manager.get_display_name() == ""

    @pytest.mark.asyncio
    async def test_active_user(self, auth_manager):
        await auth_manager.login("user@yallasouq.ps", "secret1")

        assert auth_manager.has_permission("post_ad") is True
        assert auth_manager.has_permission("business_features") is False
        assert auth_manager.has_permission("admin_panel") is False
        assert auth_manager.has_permission("delete_everything") is False

    @pytest.mark.asyncio
    async def test_admin_and_business(self, auth_manager, profiles):
        profiles.profiles["user-1"] = {"is_business_verified": True, "account_status": "suspended"}
        await auth_manager.login("admin@yallasouq.ps", "secret1")

        assert auth_manager.has_permission("admin_panel") is True
        assert auth_manager.has_permission("business_features") is True
        assert auth_manager.has_permission("post_ad") is False

    @pytest.mark.asyncio
    async def test_display_name_fallbacks(self, auth_manager, profiles):
        await auth_manager.login("user@yallasouq.ps", "secret1")
        assert auth_manager.get_display_name() == "سامي خليل"

        await auth_manager.update_profile({"last_name": ""})
        assert auth_manager.get_display_name() == "سامي"

        await auth_manager.update_profile({"first_name": ""})
        assert auth_manager.get_display_name() == "user"


def test_error_messages():
    assert get_error_message("Email not confirmed") == "يرجى تأكيد البريد الإلكتروني أولاً"
    assert get_error_message("Too many requests") == "محاولات كثيرة، يرجى المحاولة لاحقاً"
    assert get_error_message("Something new") == "Something new"
