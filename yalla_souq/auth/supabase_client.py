"""Supabase authentication, REST transport and profile clients."""

import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import ValidationError

from yalla_souq.auth.schemas import AuthChangeEvent, AuthUser, Session, UserProfile
from yalla_souq.core.config import SupabaseConfig
from yalla_souq.core.exceptions import AuthProviderError, ConfigurationError
from yalla_souq.core.logging import AppLogger, get_logger
from yalla_souq.core.protocols import AuthChangeHandler, Unsubscribe

logger = get_logger(__name__)

# Keys GoTrue uses for the human-readable message, newest API first
_ERROR_MESSAGE_KEYS = ("msg", "error_description", "message", "error")

# Accept header asking PostgREST for a single object instead of an array
PGRST_OBJECT = "application/vnd.pgrst.object+json"


def _error_message(response: httpx.Response) -> str:
    """Pull the English error message out of a GoTrue/PostgREST error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in _ERROR_MESSAGE_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return response.text or response.reason_phrase


def _parse_user(data: dict[str, Any]) -> AuthUser:
    return AuthUser(
        id=data["id"],
        email=data.get("email") or "",
        email_confirmed_at=data.get("email_confirmed_at"),
        created_at=data.get("created_at"),
        user_metadata=data.get("user_metadata") or {},
    )


def _parse_session(data: dict[str, Any]) -> Session:
    return Session(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token"),
        expires_at=data.get("expires_at"),
        user=_parse_user(data["user"]),
    )


class SupabaseAuthClient:
    """Client for the Supabase GoTrue API and transport for its PostgREST tables.

    Holds the current session in memory and notifies subscribers on
    sign-in, sign-out, token refresh and recovery.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] | None = None,
        app_logger: AppLogger | None = None,
    ):
        """Initialize Supabase client.

        Args:
            url: Supabase project URL
            api_key: Supabase anon or service role key
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
            clock: Source of the current time for expiry checks
            app_logger: Records every API call, its status and duration
        """
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._clock = clock or (lambda: datetime.now(UTC))
        self.app_logger = app_logger or AppLogger(clock=self._clock)
        self._client: httpx.AsyncClient | None = None
        self._session: Session | None = None
        self._handlers: list[AuthChangeHandler] = []

    @property
    def client(self) -> httpx.AsyncClient:
        """Get async HTTP client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.url,
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    @property
    def session(self) -> Session | None:
        return self._session

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # --- events ---

    def on_change(self, handler: AuthChangeHandler) -> Unsubscribe:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def _emit(self, event: AuthChangeEvent, session: Session | None) -> None:
        logger.info("auth_state_changed", auth_event=event.value)
        for handler in list(self._handlers):
            await handler(event, session)

    # --- transport ---

    async def send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        token: str | None = None,
    ) -> httpx.Response:
        """Send a request to the project API and return the successful response.

        Every call is recorded on the app logger with its status and duration.

        Args:
            method: HTTP method
            path: Path under the project URL, e.g. ``/rest/v1/ads``
            json: JSON body
            params: Query parameters (PostgREST filters go here)
            headers: Extra headers such as ``Prefer`` or ``Accept``
            token: User access token; the API key is used when omitted

        Raises:
            AuthProviderError: On HTTP error status or transport failure
        """
        request_headers = dict(headers or {})
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        self.app_logger.api_call(method, path, params)
        start = time.perf_counter()
        try:
            response = await self.client.request(
                method, path, json=json, params=params, headers=request_headers or None
            )
        except httpx.RequestError as e:
            self.app_logger.performance(f"Supabase {method} {path} (FAILED)", (time.perf_counter() - start) * 1000)
            logger.warning("supabase_request_failed", path=path, error=str(e))
            raise AuthProviderError("Network error") from e

        self.app_logger.api_response(method, path, response.status_code)
        self.app_logger.performance(f"Supabase {method} {path}", (time.perf_counter() - start) * 1000)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AuthProviderError(
                _error_message(e.response),
                status_code=e.response.status_code,
            ) from e
        return response

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        token: str | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        response = await self.send(method, path, json=json, params=params, token=token)
        if not response.content:
            return None
        return response.json()

    # --- session ---

    async def get_session(self) -> Session | None:
        """Return the current session, refreshing an expired access token.

        An expired session without a refresh token is dropped.
        """
        session = self._session
        if session is None or not session.is_expired(self._clock()):
            return session
        if not session.refresh_token:
            self._session = None
            return None
        return await self.refresh_session(session.refresh_token)

    async def refresh_session(self, refresh_token: str) -> Session:
        """Exchange a refresh token for a new session.

        Raises:
            AuthProviderError: If the refresh token is rejected
        """
        data = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        self._session = self._build_session(data)
        await self._emit(AuthChangeEvent.TOKEN_REFRESHED, self._session)
        return self._session

    def _build_session(self, data: Any) -> Session:
        try:
            return _parse_session(data)
        except (KeyError, TypeError, ValidationError) as e:
            raise AuthProviderError(f"Invalid session data: {e}") from e

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """Sign in with email and password.

        Raises:
            AuthProviderError: With GoTrue's message, e.g. ``Invalid login credentials``
        """
        data = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        self._session = self._build_session(data)
        await self._emit(AuthChangeEvent.SIGNED_IN, self._session)
        return self._session

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> tuple[AuthUser, Session | None]:
        """Register a new user.

        Returns:
            The created user and, when email confirmation is disabled, a session

        Raises:
            AuthProviderError: With GoTrue's message, e.g. ``User already registered``
        """
        data = await self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata},
        )
        try:
            if data.get("access_token"):
                session = _parse_session(data)
                self._session = session
                await self._emit(AuthChangeEvent.SIGNED_IN, session)
                return session.user, session
            # Confirmation pending: GoTrue returns the bare user object
            return _parse_user(data.get("user") or data), None
        except (AttributeError, KeyError, TypeError, ValidationError) as e:
            raise AuthProviderError(f"Invalid user data: {e}") from e

    async def sign_out(self) -> None:
        """Revoke the current session server-side and drop it locally."""
        session = self._session
        self._session = None
        try:
            if session is not None:
                await self._request("POST", "/auth/v1/logout", token=session.access_token)
        finally:
            await self._emit(AuthChangeEvent.SIGNED_OUT, None)

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        await self._request(
            "POST",
            "/auth/v1/recover",
            params={"redirect_to": redirect_to},
            json={"email": email},
        )

    async def verify_otp(self, token_hash: str, otp_type: str) -> AuthUser:
        """Confirm an emailed token hash and start the resulting session.

        Raises:
            AuthProviderError: If the token is invalid or expired
        """
        data = await self._request(
            "POST",
            "/auth/v1/verify",
            json={"type": otp_type, "token_hash": token_hash},
        )
        self._session = self._build_session(data)
        event = AuthChangeEvent.PASSWORD_RECOVERY if otp_type == "recovery" else AuthChangeEvent.SIGNED_IN
        await self._emit(event, self._session)
        return self._session.user


class SupabaseProfileRepository:
    """Profile rows in the ``profiles`` table, through PostgREST."""

    TABLE_PATH = "/rest/v1/profiles"

    def __init__(self, auth_client: SupabaseAuthClient):
        self._auth = auth_client

    def _token(self) -> str | None:
        session = self._auth.session
        return session.access_token if session else None

    async def get_profile(self, user: AuthUser) -> UserProfile:
        response = await self._auth.send(
            "GET",
            self.TABLE_PATH,
            params={"id": f"eq.{user.id}", "select": "*"},
            headers={"Accept": PGRST_OBJECT},
            token=self._token(),
        )
        try:
            return UserProfile.model_validate({"email": user.email, **response.json()})
        except (ValueError, ValidationError) as e:
            raise AuthProviderError(f"Invalid profile data: {e}") from e

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> None:
        await self._auth.send(
            "PATCH",
            self.TABLE_PATH,
            params={"id": f"eq.{user_id}"},
            json=changes,
            headers={"Prefer": "return=minimal"},
            token=self._token(),
        )


def create_supabase_client(config: SupabaseConfig, app_logger: AppLogger | None = None) -> SupabaseAuthClient:
    """Build the auth client from configuration.

    Raises:
        ConfigurationError: If the project URL or API key is missing
    """
    if not config.url:
        raise ConfigurationError("SUPABASE_URL environment variable is not set")
    api_key = config.anon_key or config.service_key
    if not api_key:
        raise ConfigurationError("SUPABASE_ANON_KEY or SUPABASE_SERVICE_KEY must be set")
    return SupabaseAuthClient(url=config.url, api_key=api_key, timeout=config.timeout_seconds, app_logger=app_logger)
