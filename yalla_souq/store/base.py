"""Base ad repository with the listing shortcuts every backend shares."""

from abc import ABC, abstractmethod

from yalla_souq.store.models import AdFilters, AdPage

AD_NOT_FOUND = "الإعلان غير موجود"
CATEGORY_NOT_FOUND = "الفئة غير موجودة"
AD_CREATE_FAILED = "فشل في إنشاء الإعلان"
AD_UPDATE_FAILED = "فشل في تحديث الإعلان"
AD_DELETE_FAILED = "فشل في حذف الإعلان"
ADS_FETCH_FAILED = "فشل في جلب الإعلانات"
CATEGORIES_FETCH_FAILED = "فشل في جلب الفئات"
FAVORITE_FAILED = "فشل في إضافة/إزالة المفضلة"
STATS_FAILED = "فشل في جلب الإحصائيات"
LOGIN_REQUIRED = "يجب تسجيل الدخول أولاً"
NO_CHANGES = "لا توجد تغييرات لحفظها"

FEATURED_LIMIT = 10


class BaseAdRepository(ABC):
    """Shortcuts built on ``list_ads``.

    Subclasses implement the storage operations and say who the current
    user is.
    """

    @abstractmethod
    async def list_ads(self, filters: AdFilters | None = None, page: int = 1, limit: int = 20) -> AdPage:
        """Filter, sort newest first, then return one page."""

    @abstractmethod
    def current_user_id(self) -> str | None:
        """Id of the signed-in user, or None for an anonymous caller."""

    async def get_featured_ads(self, limit: int = FEATURED_LIMIT) -> AdPage:
        return await self.list_ads(AdFilters(is_featured=True), page=1, limit=limit)

    async def get_urgent_ads(self, limit: int = FEATURED_LIMIT) -> AdPage:
        return await self.list_ads(AdFilters(is_urgent=True), page=1, limit=limit)

    async def search_ads(
        self,
        term: str,
        filters: AdFilters | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> AdPage:
        """Full-text-ish search on title and description, combined with ``filters``."""
        filters = (filters or AdFilters()).model_copy(update={"search": term})
        return await self.list_ads(filters, page=page, limit=limit)

    async def get_user_ads(self, user_id: str | None = None, page: int = 1, limit: int = 20) -> AdPage:
        user_id = user_id or self.current_user_id()
        if not user_id:
            return AdPage(error=LOGIN_REQUIRED)
        return await self.list_ads(AdFilters(user_id=user_id), page=page, limit=limit)
