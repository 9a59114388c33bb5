"""Marketplace record models shared by the ad repositories."""

from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

PriceType = Literal["fixed", "negotiable", "free", "contact"]
AdStatus = Literal["active", "sold", "expired"]
AdType = Literal["sell", "buy", "rent", "service", "job"]
ConditionType = Literal["new", "used", "refurbished"]


class Category(BaseModel):
    """Static category reference data."""

    id: str
    name: str
    name_en: str | None = None
    slug: str
    icon: str
    color: str
    sort_order: int
    is_active: bool = True


class MockUser(BaseModel):
    """Public seller profile embedded in ads."""

    id: str
    first_name: str
    last_name: str
    avatar_url: str | None = None
    is_business_verified: bool = False
    created_at: datetime


class AdImage(BaseModel):
    id: str
    ad_id: str
    image_url: str
    thumbnail_url: str | None = None
    is_primary: bool = False
    sort_order: int = 0


class Ad(BaseModel):
    """A single classified listing."""

    id: str
    user_id: str
    title: str
    description: str
    category_id: str
    price: float | None = None
    currency: str = "ILS"
    price_type: PriceType = "fixed"
    city: str = ""
    region: str = ""
    status: AdStatus = "active"
    ad_type: AdType = "sell"
    condition_type: ConditionType | None = None
    is_featured: bool = False
    is_urgent: bool = False
    contact_name: str = ""
    contact_phone: str = ""
    contact_email: str | None = None
    contact_method: list[str] = Field(default_factory=lambda: ["phone"])
    views_count: int = 0
    favorites_count: int = 0
    messages_count: int = 0
    is_business_ad: bool = False
    created_at: datetime
    updated_at: datetime
    expires_at: datetime
    category: Category | None = None
    user: MockUser | None = None
    images: list[AdImage] | None = None
    is_favorited: bool | None = None


class AdCreate(BaseModel):
    """Partial ad payload; anything missing gets a default."""

    title: str | None = None
    description: str | None = None
    category_id: str | None = None
    price: float | None = None
    currency: str | None = None
    price_type: PriceType | None = None
    city: str | None = None
    region: str | None = None
    ad_type: AdType | None = None
    condition_type: ConditionType | None = None
    is_urgent: bool | None = None
    contact_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    contact_method: list[str] | None = None


class AdUpdate(AdCreate):
    """Fields an owner may change on an existing ad. Only fields that are set are written."""

    status: AdStatus | None = None


class AdFilters(BaseModel):
    """Listing filters. Unset or falsy values are not applied."""

    category: str | None = None
    city: str | None = None
    search: str | None = None
    is_featured: bool = False
    is_urgent: bool = False
    user_id: str | None = None


class StoreResult(BaseModel, Generic[T]):
    """``{data, error}`` result returned by every store operation."""

    data: T | None = None
    error: str | None = None


class AdPage(BaseModel):
    data: list[Ad] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False
    error: str | None = None


class StoreStats(BaseModel):
    total_ads: int
    total_users: int
    total_categories: int
