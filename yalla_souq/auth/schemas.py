"""Authentication schemas for Supabase integration."""

from datetime import datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field

AccountStatus = Literal["active", "suspended", "pending"]


class AuthChangeEvent(StrEnum):
    """Session lifecycle events emitted by a session provider."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


class AuthUser(BaseModel):
    """User record from Supabase auth.users."""

    id: str = Field(..., description="User UUID from Supabase")
    email: str = Field(..., description="User email address")
    email_confirmed_at: str | None = Field(default=None, description="ISO timestamp of email confirmation")
    created_at: str | None = Field(default=None, description="ISO timestamp of user creation")
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    def __hash__(self) -> int:
        """Hash based on id for use in sets/dicts."""
        return hash(self.id)


class Session(BaseModel):
    """Session model for authenticated user sessions."""

    access_token: str = Field(..., description="JWT access token")
    user: AuthUser = Field(..., description="Authenticated user")
    expires_at: int | None = Field(default=None, description="Unix timestamp of token expiration")
    refresh_token: str | None = Field(
        default=None, description="Refresh token for obtaining new access tokens"
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now.timestamp() >= self.expires_at


class UserProfile(BaseModel):
    """Marketplace profile row joined to an auth user."""

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    date_of_birth: str | None = None
    gender: Literal["male", "female", "other"] | None = None
    address_street: str | None = None
    address_city: str | None = None
    address_region: str | None = None
    address_postal_code: str | None = None
    address_country: str | None = None
    business_name: str | None = None
    business_type: str | None = None
    business_phone: str | None = None
    business_email: str | None = None
    business_address: str | None = None
    tax_number: str | None = None
    is_business_verified: bool = False
    email_notifications: bool = True
    sms_notifications: bool = False
    marketing_emails: bool = False
    profile_visibility: Literal["public", "private"] = "public"
    language: Literal["ar", "en", "he"] = "ar"
    email_verified: bool = False
    phone_verified: bool = False
    account_status: AccountStatus = "pending"
    created_at: str | None = None
    updated_at: str | None = None


class SignupData(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str
    phone: str | None = None
    accept_terms: bool = False
    receive_newsletter: bool = False


class AuthErrorInfo(BaseModel):
    message: str
    code: str | None = None


class AuthResponse(BaseModel):
    """``{success, error}`` result of every auth operation."""

    success: bool
    error: AuthErrorInfo | None = None
    user: UserProfile | AuthUser | None = None
    session: Session | None = None

    @classmethod
    def failure(cls, message: str, code: str | None = None) -> "AuthResponse":
        return cls(success=False, error=AuthErrorInfo(message=message, code=code))


class AuthState(BaseModel):
    """Snapshot of the client-side auth state."""

    user: UserProfile | None = None
    is_loading: bool = True
    error: str | None = None
    is_authenticated: bool = False
    login_attempts: int = 0
    is_blocked: bool = False
