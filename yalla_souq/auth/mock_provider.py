"""Offline session provider and profile repository for demo mode.

Active when ``USE_MOCK_DATA=true``. Accepts a fixed set of demo accounts
and synthesizes an Arabic demo profile for every signed-in user.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from yalla_souq.auth.errors import MOCK_INVALID_CREDENTIALS
from yalla_souq.auth.schemas import AuthChangeEvent, AuthUser, Session, UserProfile
from yalla_souq.core.exceptions import AuthProviderError
from yalla_souq.core.logging import get_logger
from yalla_souq.core.protocols import AuthChangeHandler, Unsubscribe
from yalla_souq.utils.helpers import sleep

logger = get_logger(__name__)

VALID_EMAILS: frozenset[str] = frozenset(
    {
        "admin@yallasouq.ps",
        "user@yallasouq.ps",
        "test@yallasouq.ps",
        "maria-ashhab@gmail.com",
    }
)
MIN_PASSWORD_LENGTH = 6
SESSION_LIFETIME = timedelta(hours=1)
MOCK_USER_PREFIX = "mock-user-"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MockSessionProvider:
    """In-memory stand-in for the Supabase auth API."""

    def __init__(self, delay_ms: int = 1000, clock: Callable[[], datetime] | None = None):
        self.delay_ms = delay_ms
        self._clock = clock or _utcnow
        self._session: Session | None = None
        self._handlers: list[AuthChangeHandler] = []
        self._pending: dict[str, AuthUser] = {}

    def _millis(self) -> int:
        return int(self._clock().timestamp() * 1000)

    def on_change(self, handler: AuthChangeHandler) -> Unsubscribe:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def _emit(self, event: AuthChangeEvent, session: Session | None) -> None:
        for handler in list(self._handlers):
            await handler(event, session)

    def _new_session(self, user: AuthUser) -> Session:
        millis = self._millis()
        return Session(
            access_token=f"mock-token-{millis}",
            refresh_token=f"mock-refresh-{millis}",
            expires_at=int((self._clock() + SESSION_LIFETIME).timestamp()),
            user=user,
        )

    async def get_session(self) -> Session | None:
        if self._session is not None and self._session.is_expired(self._clock()):
            self._session = None
        return self._session

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        await sleep(self.delay_ms)
        email = email.strip().lower()

        if email not in VALID_EMAILS or len(password) < MIN_PASSWORD_LENGTH:
            logger.info("mock_login_rejected", email=email)
            raise AuthProviderError(MOCK_INVALID_CREDENTIALS, status_code=400)

        user = AuthUser(
            id=f"{MOCK_USER_PREFIX}{self._millis()}",
            email=email,
            email_confirmed_at=self._clock().isoformat(),
            created_at=self._clock().isoformat(),
        )
        self._session = self._new_session(user)
        logger.info("mock_login_succeeded", email=email)
        await self._emit(AuthChangeEvent.SIGNED_IN, self._session)
        return self._session

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> tuple[AuthUser, Session | None]:
        """Register a demo user; confirmation is always pending.

        The confirmation token hash is ``mock-otp-<user id>``.
        """
        await sleep(self.delay_ms)
        if email in VALID_EMAILS:
            raise AuthProviderError("User already registered", status_code=422)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthProviderError("Password should be at least 6 characters", status_code=422)

        user = AuthUser(
            id=f"{MOCK_USER_PREFIX}{self._millis()}",
            email=email,
            created_at=self._clock().isoformat(),
            user_metadata=dict(metadata),
        )
        self._pending[f"mock-otp-{user.id}"] = user
        return user, None

    async def sign_out(self) -> None:
        self._session = None
        await self._emit(AuthChangeEvent.SIGNED_OUT, None)

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        await sleep(self.delay_ms)
        logger.info("mock_password_reset_requested", email=email, redirect_to=redirect_to)

    async def verify_otp(self, token_hash: str, otp_type: str) -> AuthUser:
        user = self._pending.pop(token_hash, None)
        if user is None:
            raise AuthProviderError("Token has expired or is invalid", status_code=403)

        user = user.model_copy(update={"email_confirmed_at": self._clock().isoformat()})
        self._session = self._new_session(user)
        event = AuthChangeEvent.PASSWORD_RECOVERY if otp_type == "recovery" else AuthChangeEvent.SIGNED_IN
        await self._emit(event, self._session)
        return user


class MockProfileRepository:
    """Synthesizes the demo profile and keeps profile updates in memory."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or _utcnow
        self._changes: dict[str, dict[str, Any]] = {}

    async def get_profile(self, user: AuthUser) -> UserProfile:
        now = self._clock().isoformat()
        profile: dict[str, Any] = {
            "id": user.id,
            "email": user.email,
            "first_name": user.user_metadata.get("first_name") or "مستخدم",
            "last_name": user.user_metadata.get("last_name") or "تجريبي",
            "phone": "+970123456789",
            "is_business_verified": False,
            "email_notifications": True,
            "sms_notifications": True,
            "marketing_emails": True,
            "profile_visibility": "public",
            "language": "ar",
            "email_verified": True,
            "phone_verified": True,
            "account_status": "active",
            "created_at": now,
            "updated_at": now,
        }
        profile.update(self._changes.get(user.id, {}))
        return UserProfile.model_validate(profile)

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> None:
        self._changes.setdefault(user_id, {}).update(changes)
