"""Structured logging configuration using structlog.

Two layers live here:

- ``setup_logging`` wires stdlib logging and the structlog processor chain
  once at startup.
- ``AppLogger`` is the process-wide leveled logger that keeps the most
  recent entries in memory (for the mock-data admin page) and echoes them
  to the structlog console sink depending on the environment.
"""

import contextlib
import json
import logging
import sys
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TypeVar

import structlog

T = TypeVar("T")

LEVEL_ORDER: dict[str, int] = {"debug": 0, "info": 1, "warn": 2, "error": 3}

# AppLogger level -> structlog/stdlib method name
_SINK_METHODS = {"debug": "debug", "info": "info", "warn": "warning", "error": "error"}

DEFAULT_CAPACITY = 100
SLOW_OPERATION_MS = 1000


def setup_logging(log_level: str = "info", json_format: bool = False) -> None:
    """Configure structured logging.

    Args:
        log_level: Logging level (debug, info, warn, error)
        json_format: If True, output JSON format; otherwise, console-friendly format
    """
    level_name = _SINK_METHODS.get(log_level.lower(), log_level).upper()
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors_list = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors_list = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors_list,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def normalize_level(level: str | None) -> str:
    """Map a configured level name onto debug/info/warn/error."""
    value = (level or "info").lower()
    if value == "warning":
        return "warn"
    return value if value in LEVEL_ORDER else "info"


def _jsonable(value: Any) -> Any:
    """Best-effort conversion of an arbitrary payload into JSON-safe data."""
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, BaseException):
        return {"name": type(value).__name__, "message": str(value)}
    try:
        return json.loads(json.dumps(value, default=str, ensure_ascii=False))
    except (TypeError, ValueError):
        return repr(value)


@dataclass
class LogEntry:
    """Single recorded log event."""

    level: str
    message: str
    timestamp: str
    data: Any = None
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "message": self.message,
            "data": _jsonable(self.data),
            "timestamp": self.timestamp,
            "source": self.source,
        }


@dataclass
class AppLogger:
    """Leveled logger with a fixed-capacity in-memory buffer.

    Entries below ``level`` are dropped entirely. Recorded entries are kept
    in a FIFO of ``capacity`` items (oldest evicted first) and echoed to the
    structlog sink: every level in development, warn/error otherwise.
    """

    level: str = "info"
    is_development: bool = False
    capacity: int = DEFAULT_CAPACITY
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(UTC), repr=False)
    sink: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.level = normalize_level(self.level)
        self._entries: deque[LogEntry] = deque(maxlen=self.capacity)
        if self.sink is None:
            self.sink = get_logger("yalla_souq.app")

    def should_log(self, level: str) -> bool:
        return LEVEL_ORDER[level] >= LEVEL_ORDER[self.level]

    def _log(self, level: str, message: str, data: Any = None, source: str | None = None) -> None:
        if not self.should_log(level):
            return

        entry = LogEntry(
            level=level,
            message=message,
            data=data,
            timestamp=self.clock().isoformat(),
            source=source,
        )
        self._entries.append(entry)

        if self.is_development or level in ("warn", "error"):
            self._echo(entry)

    def _echo(self, entry: LogEntry) -> None:
        # A broken console sink must never break the caller.
        with contextlib.suppress(Exception):
            method = getattr(self.sink, _SINK_METHODS[entry.level])
            context: dict[str, Any] = {}
            if entry.source:
                context["source"] = entry.source
            if entry.data is not None:
                context["data"] = entry.data
            method(entry.message, **context)

    def debug(self, message: str, data: Any = None, source: str | None = None) -> None:
        self._log("debug", message, data, source)

    def info(self, message: str, data: Any = None, source: str | None = None) -> None:
        self._log("info", message, data, source)

    def warn(self, message: str, data: Any = None, source: str | None = None) -> None:
        self._log("warn", message, data, source)

    def error(self, message: str, error: Any = None, source: str | None = None) -> None:
        self._log("error", message, error, source)

    def get_recent_logs(self, count: int = 10) -> list[LogEntry]:
        """Get the most recent entries, oldest first."""
        if count <= 0:
            return []
        return list(self._entries)[-count:]

    def clear_logs(self) -> None:
        self._entries.clear()

    def api_call(self, method: str, url: str, data: Any = None) -> None:
        self.debug(f"API {method.upper()}: {url}", data, "API")

    def api_response(self, method: str, url: str, status: int, data: Any = None) -> None:
        """Record an API response; severity follows the status code."""
        if status >= 400:
            level = "error"
        elif status >= 300:
            level = "warn"
        else:
            level = "debug"
        self._log(level, f"API {method.upper()} {status}: {url}", data, "API")

    def user_action(self, action: str, data: Any = None) -> None:
        self.info(f"User Action: {action}", data, "USER")

    def performance(self, operation: str, duration_ms: float, data: Any = None) -> None:
        """Record an operation duration, warning when it exceeds one second."""
        level = "warn" if duration_ms > SLOW_OPERATION_MS else "debug"
        self._log(level, f"Performance: {operation} took {duration_ms:.0f}ms", data, "PERF")


async def with_performance_log(
    logger: AppLogger,
    operation: str,
    fn: Callable[[], Awaitable[T]],
) -> T:
    """Await ``fn`` and record how long it took.

    Failures are recorded as ``<operation> (FAILED)`` and re-raised.
    """
    start = time.perf_counter()
    try:
        result = await fn()
    except Exception:
        logger.performance(f"{operation} (FAILED)", (time.perf_counter() - start) * 1000)
        raise
    logger.performance(operation, (time.perf_counter() - start) * 1000)
    return result
