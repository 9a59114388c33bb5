"""Common test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from yalla_souq.auth.manager import AuthManager
from yalla_souq.auth.mock_provider import MockProfileRepository, MockSessionProvider
from yalla_souq.auth.schemas import AuthChangeEvent, AuthUser, Session, UserProfile
from yalla_souq.core.config import AppConfig, AuthConfig, MockStoreConfig
from yalla_souq.core.di_container import container as di_container
from yalla_souq.core.error_boundary import ErrorBoundary
from yalla_souq.core.exceptions import AuthProviderError
from yalla_souq.core.logging import AppLogger
from yalla_souq.store.mock_store import MockDataStore

START = datetime(2025, 7, 14, 12, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeSessionProvider:
    """Scriptable session provider that records calls."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.session: Session | None = None
        self.sign_in_error: Exception | None = None
        self.sign_up_error: Exception | None = None
        self.get_session_error: Exception | None = None
        self.confirmed_signup = False
        self.calls: list[tuple] = []
        self._handlers = []

    def on_change(self, handler):
        self._handlers.append(handler)
        return lambda: self._handlers.remove(handler)

    async def _emit(self, event, session):
        for handler in list(self._handlers):
            await handler(event, session)

    def make_session(self, email: str = "user@yallasouq.ps", user_id: str = "user-1") -> Session:
        return Session(
            access_token="token",
            refresh_token="refresh",
            expires_at=int((self.clock() + timedelta(hours=1)).timestamp()),
            user=AuthUser(id=user_id, email=email),
        )

    async def get_session(self):
        if self.get_session_error:
            raise self.get_session_error
        return self.session

    async def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in", email, password))
        if self.sign_in_error:
            raise self.sign_in_error
        self.session = self.make_session(email=email)
        await self._emit(AuthChangeEvent.SIGNED_IN, self.session)
        return self.session

    async def sign_up(self, email, password, metadata):
        self.calls.append(("sign_up", email, metadata))
        if self.sign_up_error:
            raise self.sign_up_error
        user = AuthUser(
            id="new-user",
            email=email,
            email_confirmed_at=self.clock().isoformat() if self.confirmed_signup else None,
            user_metadata=metadata,
        )
        return user, None

    async def sign_out(self):
        self.calls.append(("sign_out",))
        self.session = None
        await self._emit(AuthChangeEvent.SIGNED_OUT, None)

    async def reset_password_for_email(self, email, redirect_to):
        self.calls.append(("reset", email, redirect_to))

    async def verify_otp(self, token_hash, otp_type):
        self.calls.append(("verify", token_hash, otp_type))
        if token_hash != "valid-hash":
            raise AuthProviderError("Token has expired or is invalid", status_code=403)
        return AuthUser(id="user-1", email="user@yallasouq.ps", email_confirmed_at=self.clock().isoformat())


class RecordingProfileRepository:
    """Profile repository that records updates and can be told to fail."""

    def __init__(self):
        self.profiles: dict[str, dict] = {}
        self.updates: list[tuple[str, dict]] = []
        self.fail_get = False
        self.fail_update = False

    async def get_profile(self, user):
        if self.fail_get:
            raise AuthProviderError("profile unavailable", status_code=500)
        data = {"id": user.id, "email": user.email, "first_name": "سامي", "last_name": "خليل"}
        data["account_status"] = "active"
        data.update(self.profiles.get(user.id, {}))
        return UserProfile.model_validate(data)

    async def update_profile(self, user_id, changes):
        if self.fail_update:
            raise AuthProviderError("permission denied for table profiles", status_code=403)
        self.updates.append((user_id, changes))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_config() -> AppConfig:
    """Create test configuration."""
    return AppConfig(
        environment="test",
        debug=True,
        log_level="debug",
        use_mock_data=True,
        auth=AuthConfig(mock_login_delay_ms=0),
        mock=MockStoreConfig(delay_enabled=False),
    )


@pytest.fixture
def app_logger(clock) -> AppLogger:
    return AppLogger(level="debug", is_development=False, clock=clock)


@pytest.fixture
def store(app_logger, clock) -> MockDataStore:
    """Mock data store with delays disabled."""
    return MockDataStore(logger=app_logger, delay_enabled=False, clock=clock)


@pytest.fixture
def fake_provider(clock) -> FakeSessionProvider:
    return FakeSessionProvider(clock)


@pytest.fixture
def profiles() -> RecordingProfileRepository:
    return RecordingProfileRepository()


@pytest.fixture
def auth_manager(fake_provider, profiles, app_logger, clock) -> AuthManager:
    """Auth manager over scriptable fakes."""
    return AuthManager(fake_provider, profiles, app_logger, clock=clock)


@pytest.fixture
def mock_provider(clock) -> MockSessionProvider:
    return MockSessionProvider(delay_ms=0, clock=clock)


@pytest.fixture
def mock_auth_manager(mock_provider, app_logger, clock) -> AuthManager:
    """Auth manager over the demo-mode provider."""
    return AuthManager(mock_provider, MockProfileRepository(clock), app_logger, clock=clock)


@pytest.fixture
def override_container(test_config, app_logger, store, mock_provider, mock_auth_manager):
    """Override DI providers with test instances."""
    overrides = {
        di_container.config: test_config,
        di_container.app_logger: app_logger,
        di_container.mock_store: store,
        di_container.ad_repository: store,
        di_container.session_provider: mock_provider,
        di_container.profile_repository: mock_auth_manager.profiles,
        di_container.auth_manager: mock_auth_manager,
        di_container.error_boundary: ErrorBoundary(app_logger, is_development=True),
    }
    for provider, value in overrides.items():
        provider.override(value)
    yield di_container
    for provider in overrides:
        provider.reset_override()


@pytest.fixture
def client(override_container):
    """Test client with the lifespan running against overridden providers."""
    from yalla_souq.main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
