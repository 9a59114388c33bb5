"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from yalla_souq.api.dependencies import get_cached_config
from yalla_souq.api.middleware import ErrorBoundaryMiddleware, RequestLoggingMiddleware
from yalla_souq.api.routes import router as api_router
from yalla_souq.core.di_container import container as di_container
from yalla_souq.core.logging import setup_logging
from yalla_souq.pages.admin import router as admin_router
from yalla_souq.pages.auth import router as auth_router
from yalla_souq.pages.post_ad import router as post_ad_router

logger = structlog.get_logger()

WIRED_MODULES = [
    "yalla_souq.api.dependencies",
    "yalla_souq.api.routes",
    "yalla_souq.pages.admin",
    "yalla_souq.pages.auth",
    "yalla_souq.pages.post_ad",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    config = get_cached_config()

    # Setup logging
    setup_logging(log_level=config.log_level, json_format=not config.is_development)

    # Wire DI container
    di_container.wire(modules=WIRED_MODULES)

    logger.info(
        "application_starting",
        app_name=config.app_name,
        environment=config.environment,
        use_mock_data=config.use_mock_data,
    )

    auth_manager = di_container.auth_manager()
    state = await auth_manager.initialize()
    logger.info("auth_initialized", is_authenticated=state.is_authenticated)

    yield

    await auth_manager.close()

    # Unwire DI container
    di_container.unwire()

    logger.info("application_shutting_down")
    provider = di_container.session_provider()
    if hasattr(provider, "close"):
        await provider.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_cached_config()

    app = FastAPI(
        title=config.app_name,
        description="Palestinian classified-ads marketplace",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorBoundaryMiddleware)

    # Include routers
    app.include_router(api_router, prefix="/api/v1")
    app.include_router(auth_router)
    app.include_router(post_ad_router)
    app.include_router(admin_router)

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "name": config.app_name,
            "version": "0.1.0",
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_cached_config()
    uvicorn.run(
        "yalla_souq.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )
