"""Auth state management: session tracking, login lockout and permissions.

``AuthManager`` owns the single logical user of the process. It follows the
session provider's change events and exposes every operation as a result
(``AuthResponse``) rather than an exception.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from yalla_souq.auth import errors
from yalla_souq.auth.errors import get_error_message
from yalla_souq.auth.schemas import (
    AuthChangeEvent,
    AuthResponse,
    AuthState,
    AuthUser,
    Session,
    SignupData,
    UserProfile,
)
from yalla_souq.auth.storage import LAST_LOGIN_KEY, REMEMBER_EMAIL_KEY, ClientStorage
from yalla_souq.core.exceptions import AuthProviderError
from yalla_souq.core.logging import AppLogger
from yalla_souq.core.protocols import ProfileRepository, SessionProvider, Unsubscribe

SOURCE = "AUTH"

PERMISSION_POST_AD = "post_ad"
PERMISSION_BUSINESS_FEATURES = "business_features"
PERMISSION_ADMIN_PANEL = "admin_panel"


class AuthManager:
    """Client-side auth state for the marketplace."""

    def __init__(
        self,
        provider: SessionProvider,
        profiles: ProfileRepository,
        logger: AppLogger,
        storage: ClientStorage | None = None,
        *,
        max_login_attempts: int = 5,
        lockout_minutes: int = 15,
        admin_email: str = "admin@yallasouq.ps",
        site_url: str = "http://localhost:3000",
        clock: Callable[[], datetime] | None = None,
    ):
        self.provider = provider
        self.profiles = profiles
        self.logger = logger
        self.storage = storage if storage is not None else ClientStorage()
        self.max_login_attempts = max_login_attempts
        self.lockout = timedelta(minutes=lockout_minutes)
        self.admin_email = admin_email
        self.site_url = site_url.rstrip("/")
        self._clock = clock or (lambda: datetime.now(UTC))

        self._user: UserProfile | None = None
        self._is_loading = True
        self._error: str | None = None
        self._is_authenticated = False
        self._login_attempts = 0
        self._blocked_until: datetime | None = None
        self._unsubscribe: Unsubscribe | None = None

    # --- state ---

    @property
    def user(self) -> UserProfile | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._is_authenticated

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def login_attempts(self) -> int:
        self._expire_block()
        return self._login_attempts

    @property
    def is_blocked(self) -> bool:
        self._expire_block()
        return self._blocked_until is not None

    @property
    def state(self) -> AuthState:
        return AuthState(
            user=self._user,
            is_loading=self._is_loading,
            error=self._error,
            is_authenticated=self._is_authenticated,
            login_attempts=self.login_attempts,
            is_blocked=self.is_blocked,
        )

    def _set_state(
        self,
        user: UserProfile | None,
        *,
        error: str | None = None,
        is_authenticated: bool | None = None,
    ) -> None:
        self._user = user
        self._is_loading = False
        self._error = error
        self._is_authenticated = user is not None if is_authenticated is None else is_authenticated

    def _expire_block(self) -> None:
        """Lift the lockout once its window has elapsed."""
        if self._blocked_until is not None and self._clock() >= self._blocked_until:
            self._blocked_until = None
            self._login_attempts = 0

    def _reset_lockout(self) -> None:
        self._login_attempts = 0
        self._blocked_until = None

    def _record_failed_attempt(self) -> None:
        self._login_attempts += 1
        if self._login_attempts >= self.max_login_attempts:
            self._blocked_until = self._clock() + self.lockout
            self.logger.warn(
                "Login blocked after too many failed attempts",
                {"attempts": self._login_attempts, "until": self._blocked_until.isoformat()},
                SOURCE,
            )

    # --- lifecycle ---

    async def initialize(self) -> AuthState:
        """Load the existing session and start following provider events."""
        if self._unsubscribe is None:
            self._unsubscribe = self.provider.on_change(self._on_auth_change)

        self._is_loading = True
        try:
            session = await self.provider.get_session()
        except AuthProviderError as e:
            self.logger.error("Session error", e, SOURCE)
            self._set_state(None, error=get_error_message(e.message))
            return self.state
        except Exception as e:
            self.logger.error("Auth initialization error", e, SOURCE)
            self._set_state(None, error=errors.INIT_FAILED)
            return self.state

        if session is None:
            self._set_state(None)
        else:
            await self._load_user(session.user)
        return self.state

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _load_user(self, auth_user: AuthUser) -> bool:
        try:
            profile = await self.profiles.get_profile(auth_user)
        except Exception as e:
            self.logger.error("Profile fetch error", e, SOURCE)
            self._set_state(None, error=errors.PROFILE_LOAD_FAILED)
            return False

        self._set_state(profile)
        self.storage.set_item(LAST_LOGIN_KEY, self._clock().isoformat())
        return True

    async def _on_auth_change(self, event: AuthChangeEvent, session: Session | None) -> None:
        self.logger.debug(f"Auth state changed: {event.value}", source=SOURCE)

        if event is AuthChangeEvent.SIGNED_IN:
            if session is not None and await self._load_user(session.user):
                self._reset_lockout()
        elif event is AuthChangeEvent.SIGNED_OUT:
            self._set_state(None)
            self.storage.remove_item(LAST_LOGIN_KEY)
            self.storage.remove_item(REMEMBER_EMAIL_KEY)
        elif event is AuthChangeEvent.TOKEN_REFRESHED:
            self.logger.info("Token refreshed successfully", source=SOURCE)

    # --- operations ---

    async def login(self, email: str, password: str, remember_me: bool = False) -> AuthResponse:
        """Sign in with email and password.

        Every rejected attempt counts toward the lockout; once
        ``max_login_attempts`` is reached further attempts are refused until
        ``lockout_minutes`` have passed.
        """
        if self.is_blocked:
            return AuthResponse.failure(errors.LOGIN_BLOCKED)

        self._is_loading = True
        self._error = None
        email = email.strip().lower()

        try:
            session = await self.provider.sign_in_with_password(email, password)
        except AuthProviderError as e:
            self._record_failed_attempt()
            message = get_error_message(e.message)
            self._is_loading = False
            self._error = message
            self.logger.user_action("login_failed", {"email": email, "attempts": self._login_attempts})
            return AuthResponse.failure(message, code=e.message)
        except Exception as e:
            self.logger.error("Login error", e, SOURCE)
            self._is_loading = False
            self._error = errors.LOGIN_UNEXPECTED
            return AuthResponse.failure(errors.LOGIN_UNEXPECTED)

        # The provider's SIGNED_IN event normally loaded the profile already
        if self._user is None or self._user.id != session.user.id:
            await self._load_user(session.user)
        self._reset_lockout()
        self._is_loading = False

        if remember_me:
            self.storage.set_item(REMEMBER_EMAIL_KEY, email)
        else:
            self.storage.remove_item(REMEMBER_EMAIL_KEY)

        self.logger.user_action("login", {"email": email})
        return AuthResponse(success=True, user=self._user or session.user, session=session)

    async def signup(self, data: SignupData) -> AuthResponse:
        """Create an account, then apply the default profile settings."""
        if not data.accept_terms:
            return AuthResponse.failure(errors.TERMS_REQUIRED)

        self._is_loading = True
        self._error = None
        phone = (data.phone or "").strip() or None

        try:
            user, session = await self.provider.sign_up(
                data.email.strip().lower(),
                data.password,
                {
                    "first_name": data.first_name.strip(),
                    "last_name": data.last_name.strip(),
                    "phone": phone,
                    "marketing_emails": data.receive_newsletter,
                },
            )
        except AuthProviderError as e:
            message = get_error_message(e.message)
            self._is_loading = False
            self._error = message
            return AuthResponse.failure(message, code=e.message)
        except Exception as e:
            self.logger.error("Signup error", e, SOURCE)
            self._is_loading = False
            self._error = errors.SIGNUP_UNEXPECTED
            return AuthResponse.failure(errors.SIGNUP_UNEXPECTED)

        try:
            await self.profiles.update_profile(
                user.id,
                {
                    "email_notifications": True,
                    "sms_notifications": phone is not None,
                    "marketing_emails": data.receive_newsletter,
                    "profile_visibility": "public",
                    "language": "ar",
                    "account_status": "active",
                },
            )
        except Exception as e:
            # The account exists; profile defaults can be applied later
            self.logger.warn("Profile update error", {"user_id": user.id, "error": str(e)}, SOURCE)

        self._is_loading = False
        self.logger.user_action("signup", {"email": user.email})
        return AuthResponse(success=True, user=user, session=session)

    async def logout(self) -> None:
        """Sign out. A remembered email survives logout."""
        try:
            await self.provider.sign_out()
        except Exception as e:
            self.logger.error("Logout error", e, SOURCE)
        self.storage.remove_item(LAST_LOGIN_KEY)
        self.logger.user_action("logout")

    async def update_profile(self, changes: dict[str, Any]) -> AuthResponse:
        if self._user is None:
            return AuthResponse.failure(errors.NOT_LOGGED_IN)

        payload = {**changes, "updated_at": self._clock().isoformat()}
        try:
            await self.profiles.update_profile(self._user.id, payload)
        except AuthProviderError as e:
            return AuthResponse.failure(get_error_message(e.message))
        except Exception as e:
            self.logger.error("Profile update error", e, SOURCE)
            return AuthResponse.failure(errors.PROFILE_UPDATE_FAILED)

        self._user = self._user.model_copy(update=changes)
        return AuthResponse(success=True, user=self._user)

    async def reset_password(self, email: str) -> AuthResponse:
        try:
            await self.provider.reset_password_for_email(email, f"{self.site_url}/auth/reset-password")
        except AuthProviderError as e:
            return AuthResponse.failure(get_error_message(e.message))
        except Exception as e:
            self.logger.error("Password reset error", e, SOURCE)
            return AuthResponse.failure(errors.PASSWORD_RESET_FAILED)
        return AuthResponse(success=True)

    async def verify_email(self, token_hash: str, otp_type: str = "signup") -> AuthResponse:
        try:
            user = await self.provider.verify_otp(token_hash, otp_type)
        except AuthProviderError as e:
            return AuthResponse.failure(get_error_message(e.message), code=e.message)
        return AuthResponse(success=True, user=user)

    async def get_session(self) -> Session | None:
        """Current provider session; provider failures read as no session."""
        try:
            return await self.provider.get_session()
        except AuthProviderError as e:
            self.logger.warn("Session lookup failed", {"error": e.message}, SOURCE)
            return None

    def has_permission(self, permission: str) -> bool:
        user = self._user
        if user is None:
            return False
        if permission == PERMISSION_POST_AD:
            return user.account_status == "active"
        if permission == PERMISSION_BUSINESS_FEATURES:
            return user.is_business_verified
        if permission == PERMISSION_ADMIN_PANEL:
            return user.email == self.admin_email
        return False

    def get_display_name(self) -> str:
        user = self._user
        if user is None:
            return ""
        if user.first_name and user.last_name:
            return f"{user.first_name} {user.last_name}"
        if user.first_name:
            return user.first_name
        return user.email.split("@")[0]
