"""FastAPI dependencies for DI."""

from functools import lru_cache

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from yalla_souq.auth.manager import AuthManager
from yalla_souq.auth.schemas import Session
from yalla_souq.core.config import AppConfig, get_config
from yalla_souq.core.di_container import DIContainer


@lru_cache
def get_cached_config() -> AppConfig:
    """Get cached application config."""
    return get_config()


@inject
async def get_current_session(
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
) -> Session | None:
    """Session of the process user, or None when signed out."""
    return await auth.get_session()
