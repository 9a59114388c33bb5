"""FastAPI middleware."""

import time
from typing_extensions import override

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from yalla_souq.core.di_container import container
from yalla_souq.core.exceptions import AppError

logger = structlog.get_logger()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    # Skip logging for health checks and docs to reduce noise
    SKIP_PATHS = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    @override
    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        path = request.url.path

        if path in self.SKIP_PATHS:
            return await call_next(request)

        app_logger = container.app_logger()
        app_logger.api_call(request.method, path, dict(request.query_params) or None)

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.info(
                "request_completed",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
            app_logger.api_response(request.method, path, response.status_code)
            app_logger.performance(f"{request.method} {path}", duration_ms)

            # Add timing header
            response.headers["X-Process-Time-Ms"] = f"{duration_ms:.2f}"

            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "request_failed",
                method=request.method,
                path=path,
                error=str(e),
                duration_ms=round(duration_ms, 2),
            )
            raise


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    """Contains unhandled exceptions and answers with a fallback carrying an error id."""

    @override
    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception("unhandled_exception", path=request.url.path, error=str(e))

            result = container.error_boundary().report(e, url=str(request.url))

            # Our own exceptions keep their shape and status
            if isinstance(e, AppError):
                content = e.to_dict()
                content["error"]["error_id"] = result.error_id
                return JSONResponse(status_code=e.status_code, content=content)

            return JSONResponse(
                status_code=500,
                content={
                    "error": {
                        "code": "INTERNAL_ERROR",
                        "message": result.fallback["title"],
                        "error_id": result.error_id,
                    },
                    "fallback": result.fallback,
                },
            )
