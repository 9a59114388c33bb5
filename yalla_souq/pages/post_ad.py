"""Post-ad wizard: choose the ad type for a category."""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from yalla_souq.api.schemas import AdTypePageResponse, AdTypeSelection, RedirectResponseModel
from yalla_souq.auth.manager import AuthManager
from yalla_souq.catalog.ad_types import find_ad_type, get_ad_type_options
from yalla_souq.core.di_container import DIContainer
from yalla_souq.core.protocols import AdRepository
from yalla_souq.pages.auth import with_query
from yalla_souq.store.models import Category

router = APIRouter(prefix="/post-ad", tags=["post-ad"])

LOGIN_REDIRECT = with_query("/auth/login", redirect="/post-ad")


async def _load_category(store: AdRepository, slug: str) -> Category:
    result = await store.get_category_by_slug(slug)
    if result.data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    return result.data


@router.get("/category/{slug}", response_model=None)
@inject
async def ad_type_page(
    slug: str,
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> RedirectResponse | AdTypePageResponse:
    """Ad types available for a category. Anonymous visitors are sent to login."""
    if not auth.is_authenticated:
        return RedirectResponse(LOGIN_REDIRECT, status_code=status.HTTP_302_FOUND)

    category = await _load_category(store, slug)
    return AdTypePageResponse(
        category=category,
        ad_types=[option.to_dict() for option in get_ad_type_options(slug)],
    )


@router.post("/category/{slug}/select", response_model=RedirectResponseModel)
@inject
async def select_ad_type(
    slug: str,
    selection: AdTypeSelection,
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
    store: AdRepository = Depends(Provide[DIContainer.ad_repository]),  # noqa: B008
) -> RedirectResponseModel:
    """Route to the details step for the chosen type and optional sub-type."""
    if not auth.is_authenticated:
        return RedirectResponseModel(redirect_to=LOGIN_REDIRECT)

    category = await _load_category(store, slug)

    option = find_ad_type(slug, selection.type)
    if option is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="نوع الإعلان غير متاح لهذه الفئة")

    params = {"category": category.id, "type": option.type}
    if selection.sub_type:
        if option.find_sub_type(selection.sub_type) is None:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="النوع الفرعي غير متاح")
        params["subType"] = selection.sub_type

    return RedirectResponseModel(redirect_to=with_query("/post-ad/details", **params))
