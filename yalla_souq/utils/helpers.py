"""Small generic helpers shared by routes and services."""

import asyncio
import copy
import random
import re
import string
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PALESTINIAN_PHONE_PATTERN = re.compile(r"^(\+970|970|0)?5[0-9]{8}$")
ISRAELI_PHONE_PATTERN = re.compile(r"^(\+972|972|0)?5[0-9]{8}$")

RTL_LANGUAGES = ("ar", "he", "fa", "ur")

_ALPHANUMERIC = string.ascii_letters + string.digits
_BASE36 = string.digits + string.ascii_lowercase
_WHITESPACE = re.compile(r"\s")


def class_names(*parts: str | None) -> str:
    """Join the truthy parts with spaces."""
    return " ".join(part for part in parts if part)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_palestinian_phone(phone: str) -> bool:
    return bool(PALESTINIAN_PHONE_PATTERN.match(_WHITESPACE.sub("", phone)))


def is_valid_israeli_phone(phone: str) -> bool:
    return bool(ISRAELI_PHONE_PATTERN.match(_WHITESPACE.sub("", phone)))


def generate_random_string(length: int = 8) -> str:
    return "".join(random.choices(_ALPHANUMERIC, k=length))


def random_base36(length: int = 9) -> str:
    return "".join(random.choices(_BASE36, k=length))


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def get_language_direction(lang: str) -> str:
    return "rtl" if lang in RTL_LANGUAGES else "ltr"


def deep_clone(value: T) -> T:
    return copy.deepcopy(value)


async def sleep(ms: float) -> None:
    await asyncio.sleep(ms / 1000)


def debounce(fn: Callable[..., Any], delay_ms: float) -> Callable[..., None]:
    """Delay calls to ``fn`` until ``delay_ms`` passes without a new call.

    Must be called from inside a running event loop. Only the arguments of
    the last call are used.
    """
    handle: asyncio.TimerHandle | None = None

    def debounced(*args: Any, **kwargs: Any) -> None:
        nonlocal handle
        if handle is not None:
            handle.cancel()
        loop = asyncio.get_running_loop()
        handle = loop.call_later(delay_ms / 1000, lambda: fn(*args, **kwargs))

    return debounced
