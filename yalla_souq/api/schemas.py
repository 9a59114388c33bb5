"""Request and response schemas for the API and site routes."""

from typing import Any

from pydantic import BaseModel, Field

from yalla_souq.auth.schemas import AuthErrorInfo, AuthState
from yalla_souq.store.models import Ad, Category, StoreStats

# --- Request Models ---


class LoginRequest(BaseModel):
    """Login form submission."""

    email: str = Field(..., min_length=1, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")
    remember_me: bool = Field(default=False, description="Remember the email for the next visit")


class SignupRequest(BaseModel):
    """Signup form submission."""

    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Account email")
    phone: str | None = Field(default=None, description="Palestinian mobile number")
    password: str = Field(..., description="Password")
    confirm_password: str = Field(..., description="Password confirmation")
    accept_terms: bool = Field(default=False, description="Terms and conditions accepted")
    receive_newsletter: bool = Field(default=False, description="Opt in to marketing emails")


class ResetPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1)


class AdTypeSelection(BaseModel):
    """Ad type picked on the category page."""

    type: str = Field(..., description="Ad type, e.g. sell or rent")
    sub_type: str | None = Field(default=None, description="Sub-type id, e.g. car_sell")


# --- Response Models ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    environment: str = Field(..., description="Runtime environment")
    use_mock_data: bool = Field(..., description="Whether the offline auth and data backends are active")


class AuthResultResponse(BaseModel):
    """Outcome of an auth operation, with the route the client should open next."""

    success: bool
    error: AuthErrorInfo | None = None
    redirect_to: str | None = None
    state: AuthState | None = None


class SignupPageResponse(BaseModel):
    email_confirmed: bool = False


class LoginLinkResponse(BaseModel):
    href: str


class VerifyEmailResponse(BaseModel):
    status: str = Field(..., description="verified, link_sent or error")
    message: str
    email: str | None = None
    redirect_to: str | None = None


class AdTypePageResponse(BaseModel):
    """Category header plus the ad types that can be posted under it."""

    category: Category
    ad_types: list[dict[str, Any]]


class RedirectResponseModel(BaseModel):
    redirect_to: str


class AdListResponse(BaseModel):
    data: list[Ad]
    total: int
    has_more: bool
    page: int
    limit: int


class FavoriteResponse(BaseModel):
    ad_id: str
    is_favorited: bool


class AdminDashboardResponse(BaseModel):
    """Everything the mock-data admin page shows."""

    ads: list[Ad]
    total_ads: int
    categories: list[Category]
    stats: StoreStats | None
    logs: list[dict[str, Any]]
    errors: list[str] = Field(default_factory=list)
