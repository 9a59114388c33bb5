"""Protocol interfaces for dependency injection."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from yalla_souq.auth.schemas import AuthChangeEvent, AuthUser, Session, UserProfile
    from yalla_souq.store.models import (
        Ad,
        AdCreate,
        AdFilters,
        AdPage,
        AdUpdate,
        Category,
        StoreResult,
        StoreStats,
    )

AuthChangeHandler = Callable[["AuthChangeEvent", Optional["Session"]], Awaitable[None]]
Unsubscribe = Callable[[], None]


@runtime_checkable
class SessionProvider(Protocol):
    """Auth backend interface (Supabase GoTrue or the offline mock)."""

    async def get_session(self) -> Session | None:
        """Return the current session, refreshing it if needed.

        Raises:
            AuthProviderError: If the backend cannot be reached
        """
        ...

    def on_change(self, handler: AuthChangeHandler) -> Unsubscribe:
        """Subscribe to session lifecycle events.

        Returns:
            Callable that removes the subscription
        """
        ...

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """Sign in and emit SIGNED_IN.

        Raises:
            AuthProviderError: With the backend's English message on rejection
        """
        ...

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> tuple[AuthUser, Session | None]:
        """Register a user. The session is None while email confirmation is pending."""
        ...

    async def sign_out(self) -> None:
        """Drop the session and emit SIGNED_OUT."""
        ...

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        """Send a password reset email."""
        ...

    async def verify_otp(self, token_hash: str, otp_type: str) -> AuthUser:
        """Confirm an emailed one-time token (signup, recovery, ...)."""
        ...


@runtime_checkable
class ProfileRepository(Protocol):
    """Marketplace profile storage."""

    async def get_profile(self, user: AuthUser) -> UserProfile:
        """Load the profile for an auth user.

        Raises:
            AuthProviderError: If the profile cannot be loaded
        """
        ...

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> None:
        """Persist a partial profile update.

        Raises:
            AuthProviderError: If the update is rejected
        """
        ...


@runtime_checkable
class AdRepository(Protocol):
    """Ads and categories storage (the in-memory mock or Supabase tables).

    Operations never raise for backend failures: the error is returned in
    the result's ``error`` field as an Arabic message.
    """

    async def list_categories(self) -> StoreResult[list[Category]]:
        """Active categories ordered for display."""
        ...

    async def get_category_by_slug(self, slug: str) -> StoreResult[Category]: ...

    async def get_category_by_id(self, category_id: str) -> StoreResult[Category]: ...

    async def list_ads(self, filters: AdFilters | None = None, page: int = 1, limit: int = 20) -> AdPage:
        """Active ads matching ``filters``, newest first, one page at a time."""
        ...

    async def get_ad(self, ad_id: str) -> StoreResult[Ad]: ...

    async def create_ad(self, ad_data: AdCreate) -> StoreResult[Ad]:
        """Publish a new active ad owned by the current user."""
        ...

    async def update_ad(self, ad_id: str, changes: AdUpdate) -> StoreResult[Ad]:
        """Apply the fields set on ``changes`` and return the updated ad."""
        ...

    async def delete_ad(self, ad_id: str) -> StoreResult[bool]: ...

    async def get_featured_ads(self, limit: int = 10) -> AdPage: ...

    async def get_urgent_ads(self, limit: int = 10) -> AdPage: ...

    async def search_ads(
        self, term: str, filters: AdFilters | None = None, page: int = 1, limit: int = 20
    ) -> AdPage: ...

    async def get_user_ads(self, user_id: str | None = None, page: int = 1, limit: int = 20) -> AdPage:
        """Ads posted by ``user_id``, or by the current user when omitted."""
        ...

    async def toggle_favorite(self, ad_id: str) -> StoreResult[bool]:
        """Flip the current user's favorite on an ad; the data is the new state."""
        ...

    async def stats(self) -> StoreResult[StoreStats]: ...
