"""JSON API routes for the marketplace."""

from dataclasses import asdict

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from yalla_souq.api.schemas import AdListResponse, FavoriteResponse, HealthResponse
from yalla_souq.catalog.regions import CURRENCIES, PALESTINIAN_REGIONS
from yalla_souq.core.config import AppConfig
from yalla_souq.core.di_container import DIContainer
from yalla_souq.core.protocols import AdRepository
from yalla_souq.store.base import AD_NOT_FOUND, CATEGORY_NOT_FOUND, LOGIN_REQUIRED
from yalla_souq.store.models import Ad, AdCreate, AdFilters, AdPage, AdUpdate, Category, StoreStats

router = APIRouter()

# Store messages that map to a specific status instead of the route's default
_ERROR_STATUS = {
    AD_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    CATEGORY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    LOGIN_REQUIRED: status.HTTP_401_UNAUTHORIZED,
}


def _raise_for(error: str | None, default: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
    if error:
        raise HTTPException(status_code=_ERROR_STATUS.get(error, default), detail=error)


def _page(result: AdPage, page: int, limit: int) -> AdListResponse:
    _raise_for(result.error)
    return AdListResponse(
        data=result.data,
        total=result.total,
        has_more=result.has_more,
        page=page,
        limit=limit,
    )


@router.get("/health", response_model=HealthResponse)
@inject
async def health(
    config: AppConfig = Depends(Provide[DIContainer.config]),  # noqa: B008
) -> HealthResponse:
    """Check service health and configuration."""
    return HealthResponse(
        status="ok",
        environment=config.environment,
        use_mock_data=config.use_mock_data,
    )


# --- categories ---


@router.get("/categories", response_model=list[Category])
@inject
async def list_categories(
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> list[Category]:
    result = await store.list_categories()
    _raise_for(result.error)
    return result.data or []


@router.get("/categories/{category_id}", response_model=Category)
@inject
async def get_category(
    category_id: str,
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> Category:
    result = await store.get_category_by_id(category_id)
    _raise_for(result.error)
    return result.data


# --- ads ---


@router.get("/ads", response_model=AdListResponse)
@inject
async def list_ads(
    category: str | None = None,
    city: str | None = None,
    search: str | None = None,
    is_featured: bool = False,
    is_urgent: bool = False,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> AdListResponse:
    """List active ads, newest first, with optional filters."""
    filters = AdFilters(
        category=category,
        city=city,
        search=search,
        is_featured=is_featured,
        is_urgent=is_urgent,
    )
    return _page(await store.list_ads(filters, page=page, limit=limit), page, limit)


@router.get("/ads/featured", response_model=AdListResponse)
@inject
async def featured_ads(
    limit: int = Query(default=10, ge=1, le=100),
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> AdListResponse:
    return _page(await store.get_featured_ads(limit), 1, limit)


@router.get("/ads/urgent", response_model=AdListResponse)
@inject
async def urgent_ads(
    limit: int = Query(default=10, ge=1, le=100),
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> AdListResponse:
    return _page(await store.get_urgent_ads(limit), 1, limit)


@router.get("/ads/search", response_model=AdListResponse)
@inject
async def search_ads(
    q: str = Query(..., min_length=1),
    category: str | None = None,
    city: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> AdListResponse:
    """Search titles and descriptions, optionally within a category or city."""
    result = await store.search_ads(q, AdFilters(category=category, city=city), page=page, limit=limit)
    return _page(result, page, limit)


@router.get("/ads/mine", response_model=AdListResponse)
@inject
async def my_ads(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> AdListResponse:
    return _page(await store.get_user_ads(None, page=page, limit=limit), page, limit)


@router.get("/users/{user_id}/ads", response_model=AdListResponse)
@inject
async def user_ads(
    user_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> AdListResponse:
    return _page(await store.get_user_ads(user_id, page=page, limit=limit), page, limit)


@router.get("/ads/{ad_id}", response_model=Ad)
@inject
async def get_ad(
    ad_id: str,
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> Ad:
    """Get one ad. In demo mode every read counts as a view."""
    result = await store.get_ad(ad_id)
    _raise_for(result.error)
    return result.data


@router.post("/ads", response_model=Ad, status_code=status.HTTP_201_CREATED)
@inject
async def create_ad(
    request: AdCreate,
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> Ad:
    result = await store.create_ad(request)
    _raise_for(result.error, default=status.HTTP_400_BAD_REQUEST)
    return result.data


@router.patch("/ads/{ad_id}", response_model=Ad)
@inject
async def update_ad(
    ad_id: str,
    request: AdUpdate,
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> Ad:
    """Change the fields present in the body; absent fields keep their value."""
    result = await store.update_ad(ad_id, request)
    _raise_for(result.error, default=status.HTTP_400_BAD_REQUEST)
    return result.data


@router.delete("/ads/{ad_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_ad(
    ad_id: str,
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> Response:
    result = await store.delete_ad(ad_id)
    _raise_for(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/ads/{ad_id}/favorite", response_model=FavoriteResponse)
@inject
async def toggle_favorite(
    ad_id: str,
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> FavoriteResponse:
    result = await store.toggle_favorite(ad_id)
    _raise_for(result.error)
    return FavoriteResponse(ad_id=ad_id, is_favorited=bool(result.data))


@router.get("/stats", response_model=StoreStats)
@inject
async def stats(
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> StoreStats:
    result = await store.stats()
    _raise_for(result.error)
    return result.data


# --- reference data ---


@router.get("/regions")
async def list_regions() -> dict:
    """Palestinian regions and their cities."""
    return {key: asdict(region) for key, region in PALESTINIAN_REGIONS.items()}


@router.get("/currencies")
async def list_currencies() -> list[dict]:
    return [asdict(currency) for currency in CURRENCIES]
