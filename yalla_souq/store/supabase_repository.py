"""Ads and categories stored in Supabase tables, read and written through PostgREST."""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from yalla_souq.auth.supabase_client import PGRST_OBJECT, SupabaseAuthClient
from yalla_souq.core.exceptions import AuthProviderError
from yalla_souq.core.logging import AppLogger
from yalla_souq.store.base import (
    AD_CREATE_FAILED,
    AD_DELETE_FAILED,
    AD_NOT_FOUND,
    AD_UPDATE_FAILED,
    ADS_FETCH_FAILED,
    CATEGORIES_FETCH_FAILED,
    CATEGORY_NOT_FOUND,
    FAVORITE_FAILED,
    LOGIN_REQUIRED,
    NO_CHANGES,
    STATS_FAILED,
    BaseAdRepository,
)
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

SOURCE = "SupabaseAdRepository"
AD_LIFETIME = timedelta(days=30)

ADS_PATH = "/rest/v1/ads"
CATEGORIES_PATH = "/rest/v1/categories"
FAVORITES_PATH = "/rest/v1/favorites"
PROFILES_PATH = "/rest/v1/profiles"

# Embedded resources are aliased onto the Ad model's field names
AD_SELECT = (
    "*,"
    "category:categories(id,name,name_en,slug,icon,color,sort_order,is_active),"
    "user:profiles(id,first_name,last_name,avatar_url,is_business_verified,created_at),"
    "images:ad_images(*)"
)

# PostgREST answers 406 when a single-object request matches no row
NO_SINGLE_ROW = 406
# Foreign key violation, e.g. favoriting an ad that does not exist
CONFLICT = 409


def _quoted(value: str) -> str:
    """Double-quote a value inside a PostgREST logic filter so commas and parentheses stay literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _total(response: httpx.Response, fallback: int) -> int:
    """Read the exact count from a ``Content-Range: 0-19/57`` header."""
    _, _, total = response.headers.get("content-range", "").partition("/")
    return int(total) if total.isdigit() else fallback


def _parse_ad(row: dict[str, Any]) -> Ad:
    # Nullable text columns fall back to the model defaults
    data = {key: value for key, value in row.items() if value is not None}
    data.setdefault("description", "")
    return Ad.model_validate(data)


class SupabaseAdRepository(BaseAdRepository):
    """Marketplace data in the ``ads``, ``categories`` and ``favorites`` tables.

    Requests go through the auth client's transport so they carry the
    signed-in user's token and show up in the API log. Failures are
    returned as Arabic messages in the result; the backend's own message
    is only logged.
    """

    def __init__(
        self,
        auth_client: SupabaseAuthClient,
        logger: AppLogger,
        clock: Callable[[], datetime] | None = None,
    ):
        self._auth = auth_client
        self.logger = logger
        self._clock = clock or (lambda: datetime.now(UTC))

    def _token(self) -> str | None:
        session = self._auth.session
        return session.access_token if session else None

    def current_user_id(self) -> str | None:
        session = self._auth.session
        return session.user.id if session else None

    def _failed(self, message: str, error: Exception, **data: Any) -> str:
        self.logger.error(message, {"error": str(error), **data}, SOURCE)
        return message

    # --- categories ---

    async def list_categories(self) -> StoreResult[list[Category]]:
        self.logger.debug("Fetching categories from Supabase", None, SOURCE)
        try:
            response = await self._auth.send(
                "GET",
                CATEGORIES_PATH,
                params={"select": "*", "is_active": "eq.true", "order": "sort_order.asc"},
            )
            return StoreResult(data=[Category.model_validate(row) for row in response.json()])
        except (AuthProviderError, ValueError) as e:
            return StoreResult(error=self._failed(CATEGORIES_FETCH_FAILED, e))

    async def _get_category(self, column: str, value: str) -> StoreResult[Category]:
        try:
            response = await self._auth.send(
                "GET",
                CATEGORIES_PATH,
                params={column: f"eq.{value}", "select": "*"},
                headers={"Accept": PGRST_OBJECT},
            )
            return StoreResult(data=Category.model_validate(response.json()))
        except AuthProviderError as e:
            if e.provider_status == NO_SINGLE_ROW:
                return StoreResult(error=CATEGORY_NOT_FOUND)
            return StoreResult(error=self._failed(CATEGORIES_FETCH_FAILED, e, **{column: value}))
        except ValueError as e:
            return StoreResult(error=self._failed(CATEGORIES_FETCH_FAILED, e, **{column: value}))

    async def get_category_by_slug(self, slug: str) -> StoreResult[Category]:
        return await self._get_category("slug", slug)

    async def get_category_by_id(self, category_id: str) -> StoreResult[Category]:
        return await self._get_category("id", category_id)

    # --- ads ---

    async def list_ads(
        self,
        filters: AdFilters | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> AdPage:
        """Active ads matching ``filters``, newest first.

        The total comes from PostgREST's exact count so ``has_more`` holds
        across pages.
        """
        filters = filters or AdFilters()
        self.logger.debug(
            "Fetching ads from Supabase",
            {"filters": filters.model_dump(exclude_defaults=True), "page": page, "limit": limit},
            SOURCE,
        )

        start = (page - 1) * limit
        params = {
            "select": AD_SELECT,
            "status": "eq.active",
            "order": "created_at.desc",
            "offset": str(start),
            "limit": str(limit),
        }
        if filters.category:
            params["category_id"] = f"eq.{filters.category}"
        if filters.city:
            params["city"] = f"ilike.*{filters.city}*"
        if filters.search:
            pattern = _quoted(f"*{filters.search}*")
            params["or"] = f"(title.ilike.{pattern},description.ilike.{pattern})"
        if filters.is_featured:
            params["is_featured"] = "eq.true"
        if filters.is_urgent:
            params["is_urgent"] = "eq.true"
        if filters.user_id:
            params["user_id"] = f"eq.{filters.user_id}"

        try:
            response = await self._auth.send(
                "GET", ADS_PATH, params=params, headers={"Prefer": "count=exact"}, token=self._token()
            )
            ads = [_parse_ad(row) for row in response.json()]
        except (AuthProviderError, ValueError) as e:
            return AdPage(error=self._failed(ADS_FETCH_FAILED, e))

        total = _total(response, start + len(ads))
        return AdPage(data=ads, total=total, has_more=start + limit < total)

    async def get_ad(self, ad_id: str) -> StoreResult[Ad]:
        self.logger.debug("Fetching ad by ID from Supabase", {"id": ad_id}, SOURCE)
        try:
            response = await self._auth.send(
                "GET",
                ADS_PATH,
                params={"id": f"eq.{ad_id}", "status": "eq.active", "select": AD_SELECT},
                headers={"Accept": PGRST_OBJECT},
                token=self._token(),
            )
            return StoreResult(data=_parse_ad(response.json()))
        except AuthProviderError as e:
            if e.provider_status == NO_SINGLE_ROW:
                return StoreResult(error=AD_NOT_FOUND)
            return StoreResult(error=self._failed(ADS_FETCH_FAILED, e, id=ad_id))
        except ValueError as e:
            return StoreResult(error=self._failed(ADS_FETCH_FAILED, e, id=ad_id))

    async def create_ad(self, ad_data: AdCreate) -> StoreResult[Ad]:
        """Insert an active ad for the signed-in user; anonymous callers are refused."""
        user_id = self.current_user_id()
        if user_id is None:
            return StoreResult(error=LOGIN_REQUIRED)

        now = self._clock()
        row = {
            "user_id": user_id,
            "title": ad_data.title or "",
            "description": ad_data.description,
            "category_id": ad_data.category_id or "1",
            "price": ad_data.price,
            "currency": ad_data.currency or "ILS",
            "price_type": ad_data.price_type or "fixed",
            "city": ad_data.city or "",
            "region": ad_data.region,
            "status": "active",
            "ad_type": ad_data.ad_type or "sell",
            "condition_type": ad_data.condition_type,
            "is_featured": False,
            "is_urgent": bool(ad_data.is_urgent),
            "contact_name": ad_data.contact_name or "",
            "contact_phone": ad_data.contact_phone or "",
            "contact_email": ad_data.contact_email,
            "contact_method": ad_data.contact_method or ["phone"],
            "is_business_ad": False,
            "expires_at": (now + AD_LIFETIME).isoformat(),
        }
        self.logger.info("Creating new ad in Supabase", {"title": row["title"]}, SOURCE)
        try:
            response = await self._auth.send(
                "POST",
                ADS_PATH,
                params={"select": AD_SELECT},
                json=row,
                headers={"Prefer": "return=representation", "Accept": PGRST_OBJECT},
                token=self._token(),
            )
            ad = _parse_ad(response.json())
        except (AuthProviderError, ValueError) as e:
            return StoreResult(error=self._failed(AD_CREATE_FAILED, e))

        self.logger.info("Ad created successfully", {"id": ad.id}, SOURCE)
        return StoreResult(data=ad)

    async def update_ad(self, ad_id: str, changes: AdUpdate) -> StoreResult[Ad]:
        updates = changes.model_dump(mode="json", exclude_unset=True)
        if not updates:
            return StoreResult(error=NO_CHANGES)

        self.logger.info("Updating ad in Supabase", {"id": ad_id, "fields": sorted(updates)}, SOURCE)
        try:
            response = await self._auth.send(
                "PATCH",
                ADS_PATH,
                params={"id": f"eq.{ad_id}", "select": AD_SELECT},
                json=updates,
                headers={"Prefer": "return=representation", "Accept": PGRST_OBJECT},
                token=self._token(),
            )
            return StoreResult(data=_parse_ad(response.json()))
        except AuthProviderError as e:
            if e.provider_status == NO_SINGLE_ROW:
                return StoreResult(error=AD_NOT_FOUND)
            return StoreResult(error=self._failed(AD_UPDATE_FAILED, e, id=ad_id))
        except ValueError as e:
            return StoreResult(error=self._failed(AD_UPDATE_FAILED, e, id=ad_id))

    async def delete_ad(self, ad_id: str) -> StoreResult[bool]:
        self.logger.info("Deleting ad from Supabase", {"id": ad_id}, SOURCE)
        try:
            response = await self._auth.send(
                "DELETE",
                ADS_PATH,
                params={"id": f"eq.{ad_id}", "select": "id"},
                headers={"Prefer": "return=representation"},
                token=self._token(),
            )
            deleted = response.json()
        except (AuthProviderError, ValueError) as e:
            return StoreResult(data=False, error=self._failed(AD_DELETE_FAILED, e, id=ad_id))

        if not deleted:
            return StoreResult(data=False, error=AD_NOT_FOUND)
        return StoreResult(data=True)

    # --- favorites ---

    async def toggle_favorite(self, ad_id: str) -> StoreResult[bool]:
        """Remove the user's favorite row if present, otherwise add one."""
        user_id = self.current_user_id()
        if user_id is None:
            return StoreResult(data=False, error=LOGIN_REQUIRED)

        self.logger.debug("Toggling favorite status", {"adId": ad_id}, SOURCE)
        match = {"user_id": f"eq.{user_id}", "ad_id": f"eq.{ad_id}"}
        token = self._token()
        try:
            existing = await self._auth.send(
                "GET", FAVORITES_PATH, params={**match, "select": "id"}, token=token
            )
            if existing.json():
                await self._auth.send("DELETE", FAVORITES_PATH, params=match, token=token)
                return StoreResult(data=False)
            await self._auth.send(
                "POST",
                FAVORITES_PATH,
                json={"user_id": user_id, "ad_id": ad_id},
                headers={"Prefer": "return=minimal"},
                token=token,
            )
            return StoreResult(data=True)
        except AuthProviderError as e:
            if e.provider_status == CONFLICT:
                return StoreResult(data=False, error=AD_NOT_FOUND)
            return StoreResult(data=False, error=self._failed(FAVORITE_FAILED, e, adId=ad_id))
        except ValueError as e:
            return StoreResult(data=False, error=self._failed(FAVORITE_FAILED, e, adId=ad_id))

    # --- stats ---

    async def _count(self, path: str) -> int:
        response = await self._auth.send(
            "HEAD", path, params={"select": "id"}, headers={"Prefer": "count=exact"}, token=self._token()
        )
        return _total(response, 0)

    async def stats(self) -> StoreResult[StoreStats]:
        self.logger.debug("Fetching stats from Supabase", None, SOURCE)
        try:
            ads, users, categories = await asyncio.gather(
                self._count(ADS_PATH),
                self._count(PROFILES_PATH),
                self._count(CATEGORIES_PATH),
            )
        except AuthProviderError as e:
            return StoreResult(error=self._failed(STATS_FAILED, e))
        return StoreResult(data=StoreStats(total_ads=ads, total_users=users, total_categories=categories))
