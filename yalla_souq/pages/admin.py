"""Mock-data admin page: inspect the in-memory store and the recent log."""

import asyncio
import random

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from yalla_souq.api.schemas import AdminDashboardResponse, FavoriteResponse
from yalla_souq.core.di_container import DIContainer
from yalla_souq.core.logging import AppLogger
from yalla_souq.store.mock_store import MockDataStore
from yalla_souq.store.models import Ad, AdCreate, AdFilters

router = APIRouter(prefix="/admin/mock-data", tags=["admin"])

SOURCE = "MockDataAdmin"
RECENT_LOG_COUNT = 20
ADS_PAGE_SIZE = 10


def build_test_ad(millis: int) -> AdCreate:
    """Sample listing with a random price and urgency."""
    return AdCreate(
        title=f"إعلان تجريبي {millis}",
        description="هذا إعلان تجريبي تم إنشاؤه من لوحة التحكم",
        category_id="3",
        price=random.randint(100, 1099),
        currency="ILS",
        price_type="fixed",
        city="رام الله",
        region="ramallah",
        ad_type="sell",
        contact_name="مستخدم تجريبي",
        contact_phone="0591234567",
        contact_method=["phone"],
        is_urgent=random.random() > 0.5,
    )


@router.get("", response_model=AdminDashboardResponse)
@inject
async def dashboard(
    store: MockDataStore = Depends(Provide[DIContainer.mock_store]),  # noqa: B008
    app_logger: AppLogger = Depends(Provide[DIContainer.app_logger]),  # noqa: B008
) -> AdminDashboardResponse:
    """First page of ads, categories, stats and the most recent log entries."""
    ads, categories, stats = await asyncio.gather(
        store.list_ads(AdFilters(), page=1, limit=ADS_PAGE_SIZE),
        store.list_categories(),
        store.stats(),
    )
    errors = [error for error in (ads.error, categories.error, stats.error) if error]
    return AdminDashboardResponse(
        ads=ads.data,
        total_ads=ads.total,
        categories=categories.data or [],
        stats=stats.data,
        logs=[entry.to_dict() for entry in app_logger.get_recent_logs(RECENT_LOG_COUNT)],
        errors=errors,
    )


@router.post("/test-ad", response_model=Ad, status_code=status.HTTP_201_CREATED)
@inject
async def create_test_ad(
    store: MockDataStore = Depends(Provide[DIContainer.mock_store]),  # noqa: B008
    app_logger: AppLogger = Depends(Provide[DIContainer.app_logger]),  # noqa: B008
) -> Ad:
    millis = int(app_logger.clock().timestamp() * 1000)
    result = await store.create_ad(build_test_ad(millis))
    if result.data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    app_logger.info("Test ad created successfully", {"id": result.data.id}, SOURCE)
    return result.data


@router.post("/ads/{ad_id}/favorite", response_model=FavoriteResponse)
@inject
async def toggle_favorite(
    ad_id: str,
    store: MockDataStore = Depends(Provide[DIContainer.mock_store]),  # noqa: B008
    app_logger: AppLogger = Depends(Provide[DIContainer.app_logger]),  # noqa: B008
) -> FavoriteResponse:
    result = await store.toggle_favorite(ad_id)
    if result.error:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    app_logger.info("Favorite toggled", {"adId": ad_id, "isFavorited": result.data}, SOURCE)
    return FavoriteResponse(ad_id=ad_id, is_favorited=bool(result.data))


@router.delete("/logs", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def clear_logs(
    app_logger: AppLogger = Depends(Provide[DIContainer.app_logger]),  # noqa: B008
) -> None:
    app_logger.clear_logs()
