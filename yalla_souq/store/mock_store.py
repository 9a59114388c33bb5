"""In-memory marketplace store for development and testing.

Not persistent - data is lost on restart. Every operation sleeps for a short,
fixed delay to mimic network latency; tests construct the store with
``delay_enabled=False``.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from yalla_souq.core.logging import AppLogger
from yalla_souq.store.base import AD_NOT_FOUND, CATEGORY_NOT_FOUND, NO_CHANGES, BaseAdRepository
from yalla_souq.store.fixtures import build_ads, build_categories, build_users
from yalla_souq.store.models import (
    Ad,
    AdCreate,
    AdFilters,
    AdPage,
    AdUpdate,
    Category,
    MockUser,
    StoreResult,
    StoreStats,
)

SOURCE = "MockDataService"
AD_LIFETIME = timedelta(days=30)
CURRENT_USER_ID = "current_user"

# Per-operation latency in milliseconds
CATEGORIES_DELAY_MS = 200
GET_AD_DELAY_MS = 150
CREATE_AD_DELAY_MS = 500
TOGGLE_FAVORITE_DELAY_MS = 200
STATS_DELAY_MS = 100


class MockDataStore(BaseAdRepository):
    """Owns the ad/category/user collections for the lifetime of the process.

    No locking: the store assumes a single logical caller.
    """

    def __init__(
        self,
        logger: AppLogger,
        delay_enabled: bool = True,
        default_delay_ms: int = 300,
        clock: Callable[[], datetime] | None = None,
    ):
        self.logger = logger
        self.delay_enabled = delay_enabled
        self.default_delay_ms = default_delay_ms
        self._clock = clock or (lambda: datetime.now(UTC))

        self._categories: list[Category] = build_categories()
        self._users: list[MockUser] = build_users()
        self._ads: list[Ad] = build_ads(self._clock(), self._categories, self._users)

    async def _simulate_delay(self, ms: int | None = None) -> None:
        if not self.delay_enabled:
            return
        await asyncio.sleep((self.default_delay_ms if ms is None else ms) / 1000)

    def _find_ad(self, ad_id: str) -> Ad | None:
        return next((ad for ad in self._ads if ad.id == ad_id), None)

    def _find_category(self, category_id: str) -> Category | None:
        return next((c for c in self._categories if c.id == category_id), None)

    def current_user_id(self) -> str:
        return CURRENT_USER_ID

    async def list_categories(self) -> StoreResult[list[Category]]:
        self.logger.debug("Fetching categories from mock data", None, SOURCE)
        await self._simulate_delay(CATEGORIES_DELAY_MS)
        return StoreResult(data=[category.model_copy() for category in self._categories])

    async def get_category_by_slug(self, slug: str) -> StoreResult[Category]:
        self.logger.debug("Fetching category by slug from mock data", {"slug": slug}, SOURCE)
        await self._simulate_delay(CATEGORIES_DELAY_MS)
        category = next((c for c in self._categories if c.slug == slug), None)
        if category is None:
            return StoreResult(error=CATEGORY_NOT_FOUND)
        return StoreResult(data=category.model_copy())

    async def get_category_by_id(self, category_id: str) -> StoreResult[Category]:
        self.logger.debug("Fetching category by ID from mock data", {"id": category_id}, SOURCE)
        await self._simulate_delay(CATEGORIES_DELAY_MS)
        category = self._find_category(category_id)
        if category is None:
            return StoreResult(error=CATEGORY_NOT_FOUND)
        return StoreResult(data=category.model_copy())

    async def list_ads(
        self,
        filters: AdFilters | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> AdPage:
        """Filter, sort newest first, then slice one page.

        Args:
            filters: Active filters; falsy fields are ignored
            page: 1-based page number
            limit: Page size

        Returns:
            Page of ads with the total match count and a has-more flag
        """
        filters = filters or AdFilters()
        self.logger.debug(
            "Fetching ads from mock data",
            {"filters": filters.model_dump(exclude_defaults=True), "page": page, "limit": limit},
            SOURCE,
        )
        await self._simulate_delay()

        ads = list(self._ads)

        if filters.category:
            ads = [ad for ad in ads if ad.category_id == filters.category]

        if filters.city:
            city = filters.city.lower()
            ads = [ad for ad in ads if city in ad.city.lower()]

        if filters.search:
            term = filters.search.lower()
            ads = [ad for ad in ads if term in ad.title.lower() or term in ad.description.lower()]

        if filters.is_featured:
            ads = [ad for ad in ads if ad.is_featured]

        if filters.is_urgent:
            ads = [ad for ad in ads if ad.is_urgent]

        if filters.user_id:
            ads = [ad for ad in ads if ad.user_id == filters.user_id]

        ads.sort(key=lambda ad: ad.created_at, reverse=True)

        start = (page - 1) * limit
        end = start + limit
        return AdPage(
            data=[ad.model_copy(deep=True) for ad in ads[start:end]],
            total=len(ads),
            has_more=end < len(ads),
        )

    async def get_ad(self, ad_id: str) -> StoreResult[Ad]:
        """Fetch one ad. Every call counts as a view."""
        self.logger.debug("Fetching ad by ID from mock data", {"id": ad_id}, SOURCE)
        await self._simulate_delay(GET_AD_DELAY_MS)

        ad = self._find_ad(ad_id)
        if ad is None:
            return StoreResult(error=AD_NOT_FOUND)

        ad.views_count += 1
        return StoreResult(data=ad.model_copy(deep=True))

    def _next_ad_id(self, now: datetime) -> str:
        stamp = int(now.timestamp() * 1000)
        while self._find_ad(f"mock_{stamp}") is not None:
            stamp += 1
        return f"mock_{stamp}"

    async def create_ad(self, ad_data: AdCreate) -> StoreResult[Ad]:
        self.logger.info("Creating new ad in mock data", ad_data.model_dump(exclude_none=True), SOURCE)
        await self._simulate_delay(CREATE_AD_DELAY_MS)

        now = self._clock()
        category_id = ad_data.category_id or "1"
        ad = Ad(
            id=self._next_ad_id(now),
            user_id=CURRENT_USER_ID,
            title=ad_data.title or "",
            description=ad_data.description or "",
            category_id=category_id,
            price=ad_data.price,
            currency=ad_data.currency or "ILS",
            price_type=ad_data.price_type or "fixed",
            city=ad_data.city or "",
            region=ad_data.region or "",
            status="active",
            ad_type=ad_data.ad_type or "sell",
            condition_type=ad_data.condition_type,
            is_featured=False,
            is_urgent=bool(ad_data.is_urgent),
            contact_name=ad_data.contact_name or "",
            contact_phone=ad_data.contact_phone or "",
            contact_email=ad_data.contact_email,
            contact_method=ad_data.contact_method or ["phone"],
            views_count=0,
            favorites_count=0,
            messages_count=0,
            is_business_ad=False,
            created_at=now,
            updated_at=now,
            expires_at=now + AD_LIFETIME,
            category=self._find_category(category_id),
            user=MockUser(
                id=CURRENT_USER_ID,
                first_name="مستخدم",
                last_name="جديد",
                is_business_verified=False,
                created_at=now,
            ),
            is_favorited=False,
        )

        self._ads.insert(0, ad)
        self.logger.info("Ad created successfully", {"id": ad.id}, SOURCE)
        return StoreResult(data=ad.model_copy(deep=True))

    async def update_ad(self, ad_id: str, changes: AdUpdate) -> StoreResult[Ad]:
        """Apply the fields set on ``changes`` and bump ``updated_at``."""
        updates = changes.model_dump(exclude_unset=True)
        self.logger.info("Updating ad in mock data", {"id": ad_id, "fields": sorted(updates)}, SOURCE)
        await self._simulate_delay()

        index = next((i for i, ad in enumerate(self._ads) if ad.id == ad_id), None)
        if index is None:
            return StoreResult(error=AD_NOT_FOUND)
        if not updates:
            return StoreResult(error=NO_CHANGES)

        updates["updated_at"] = self._clock()
        if "category_id" in updates:
            updates["category"] = self._find_category(updates["category_id"])
        ad = self._ads[index].model_copy(update=updates)
        self._ads[index] = ad
        return StoreResult(data=ad.model_copy(deep=True))

    async def delete_ad(self, ad_id: str) -> StoreResult[bool]:
        self.logger.info("Deleting ad from mock data", {"id": ad_id}, SOURCE)
        await self._simulate_delay()

        ad = self._find_ad(ad_id)
        if ad is None:
            return StoreResult(data=False, error=AD_NOT_FOUND)
        self._ads.remove(ad)
        return StoreResult(data=True)

    async def toggle_favorite(self, ad_id: str) -> StoreResult[bool]:
        """Flip the favorited flag and adjust the favorites counter."""
        self.logger.debug("Toggling favorite status", {"adId": ad_id}, SOURCE)
        await self._simulate_delay(TOGGLE_FAVORITE_DELAY_MS)

        ad = self._find_ad(ad_id)
        if ad is None:
            return StoreResult(data=False, error=AD_NOT_FOUND)

        ad.is_favorited = not ad.is_favorited
        ad.favorites_count += 1 if ad.is_favorited else -1
        return StoreResult(data=ad.is_favorited)

    async def stats(self) -> StoreResult[StoreStats]:
        self.logger.debug("Fetching stats from mock data", None, SOURCE)
        await self._simulate_delay(STATS_DELAY_MS)
        return StoreResult(
            data=StoreStats(
                total_ads=len(self._ads),
                total_users=len(self._users),
                total_categories=len(self._categories),
            )
        )
