"""Error containment for request handlers and background units of work.

An ``ErrorBoundary`` awaits a unit of work and turns any exception into a
``BoundaryResult`` carrying a support error id and a fallback view, after
recording the failure in the application log.
"""

import asyncio
import inspect
import traceback
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import wraps
from typing import Any, NoReturn

from yalla_souq.core.exceptions import AppError
from yalla_souq.core.logging import AppLogger
from yalla_souq.utils.helpers import random_base36

SOURCE = "ErrorBoundary"
SUPPORT_EMAIL = "support@yallasouq.ps"

Fallback = Callable[[BaseException | None, str | None, bool], dict[str, Any]]
ErrorCallback = Callable[[BaseException, str], Any]


def generate_error_id(clock: Callable[[], datetime] | None = None) -> str:
    """Build a support id of the form ``ERR_<epoch-ms>_<9 base36 chars>``."""
    now = (clock or (lambda: datetime.now(UTC)))()
    return f"ERR_{int(now.timestamp() * 1000)}_{random_base36(9)}"


def error_details(error: BaseException) -> dict[str, str]:
    return {
        "name": type(error).__name__,
        "message": str(error),
        "stack": "".join(traceback.format_exception(error)),
    }


def default_fallback(error: BaseException | None, error_id: str | None, is_development: bool) -> dict[str, Any]:
    """Arabic fallback view shown in place of the failed unit."""
    return {
        "title": "حدث خطأ غير متوقع",
        "description": (
            "نعتذر عن هذا الخطأ. نحن نعمل على إصلاح المشكلة. "
            "يرجى المحاولة مرة أخرى أو العودة للصفحة الرئيسية."
        ),
        "error_id": error_id,
        "error_id_label": "معرف الخطأ (للدعم الفني):",
        "actions": [
            {"id": "retry", "label": "المحاولة مرة أخرى"},
            {"id": "home", "label": "العودة للرئيسية", "href": "/"},
            {"id": "reload", "label": "إعادة تحميل الصفحة"},
        ],
        "support": {
            "message": "إذا استمرت المشكلة، يرجى التواصل مع الدعم الفني",
            "email": SUPPORT_EMAIL,
        },
        "details": error_details(error) if is_development and error is not None else None,
    }


@dataclass
class BoundaryResult:
    """Outcome of a unit run under an error boundary."""

    ok: bool
    value: Any = None
    error_id: str | None = None
    fallback: dict[str, Any] | None = None


class ErrorBoundary:
    """Contains failures of a unit of work and supports retrying it."""

    def __init__(
        self,
        logger: AppLogger,
        fallback: Fallback | None = None,
        on_error: ErrorCallback | None = None,
        is_development: bool = False,
        retry_delay: float = 0.1,
        clock: Callable[[], datetime] | None = None,
    ):
        self.logger = logger
        self.fallback = fallback or default_fallback
        self.on_error = on_error
        self.is_development = is_development
        self.retry_delay = retry_delay
        self._clock = clock or (lambda: datetime.now(UTC))

        self.error: BaseException | None = None
        self.error_id: str | None = None
        self._last_unit: tuple[Callable[..., Any], tuple, dict] | None = None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    async def run(self, unit: Callable[..., Any], *args: Any, **kwargs: Any) -> BoundaryResult:
        """Invoke ``unit`` (sync or async) and contain any exception it raises."""
        self._last_unit = (unit, args, kwargs)
        try:
            value = unit(*args, **kwargs)
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            return self.capture(e)
        return BoundaryResult(ok=True, value=value)

    def capture(self, error: BaseException, url: str | None = None) -> BoundaryResult:
        """Record ``error`` as this boundary's current error and build its fallback."""
        result = self.report(error, url)
        self.error = error
        self.error_id = result.error_id
        return result

    def report(self, error: BaseException, url: str | None = None) -> BoundaryResult:
        """Log ``error`` and build the fallback view without touching boundary state.

        Safe to share between concurrent requests.

        Args:
            error: The exception that escaped the unit
            url: Request URL, when the unit served an HTTP request

        Returns:
            Failed result carrying the new error id
        """
        error_id = generate_error_id(self._clock)

        self.logger.error(
            f"Error boundary caught an error: {error}",
            {
                "error": error_details(error),
                "errorId": error_id,
                "environment": "development" if self.is_development else "production",
                "url": url,
                "timestamp": self._clock().isoformat(),
            },
            SOURCE,
        )

        if self.on_error is not None:
            try:
                self.on_error(error, error_id)
            except Exception as hook_error:
                self.logger.warn("on_error callback failed", {"error": str(hook_error)}, SOURCE)

        return BoundaryResult(
            ok=False,
            error_id=error_id,
            fallback=self.fallback(error, error_id, self.is_development),
        )

    def reset(self) -> None:
        self.error = None
        self.error_id = None

    async def retry(self) -> BoundaryResult:
        """Clear the error state and re-run the last unit after ``retry_delay``."""
        self.logger.info("User attempted error recovery", {"errorId": self.error_id}, SOURCE)
        self.reset()
        await asyncio.sleep(self.retry_delay)

        if self._last_unit is None:
            return BoundaryResult(ok=True)
        unit, args, kwargs = self._last_unit
        return await self.run(unit, *args, **kwargs)


def with_error_boundary(
    logger: AppLogger,
    fallback: Fallback | None = None,
    is_development: bool = False,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[BoundaryResult]]]:
    """Decorate an async function so its calls run under one shared boundary.

    The boundary is exposed as ``wrapper.boundary`` for retries.
    """

    def decorator(fn: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[BoundaryResult]]:
        boundary = ErrorBoundary(logger, fallback=fallback, is_development=is_development)

        @wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> BoundaryResult:
            return await boundary.run(fn, *args, **kwargs)

        wrapper.boundary = boundary  # type: ignore[attr-defined]
        return wrapper

    return decorator


class ErrorHandler:
    """Reports errors raised outside a boundary's direct call path."""

    def __init__(self, logger: AppLogger):
        self.logger = logger
        self.last_error: BaseException | None = None

    def handle(self, error: BaseException | str) -> NoReturn:
        """Log ``error`` and re-raise it so the enclosing boundary catches it."""
        error_obj = AppError(error) if isinstance(error, str) else error
        self.logger.error("Async error caught by error handler", error_obj, "ErrorHandler")
        self.last_error = error_obj
        raise error_obj

    def clear_error(self) -> None:
        self.last_error = None
