"""Display formatting for prices, dates, phone numbers and file sizes.

All output is Arabic-first, matching what the marketplace renders.
"""

import math
import re
from datetime import UTC, datetime

from yalla_souq.catalog.regions import get_currency

ARABIC_MONTHS = (
    "يناير",
    "فبراير",
    "مارس",
    "أبريل",
    "مايو",
    "يونيو",
    "يوليو",
    "أغسطس",
    "سبتمبر",
    "أكتوبر",
    "نوفمبر",
    "ديسمبر",
)

FILE_SIZE_UNITS = ("بايت", "كيلوبايت", "ميجابايت", "جيجابايت")

_NON_DIGITS = re.compile(r"\D")


def _to_datetime(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _trim_number(value: float) -> str:
    """Render a number with at most 2 decimals and no trailing zeros."""
    rounded = round(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0").rstrip(".")


def format_currency(amount: float, currency: str = "ILS") -> str:
    """Format an amount with thousands separators and the currency symbol.

    >>> format_currency(4200)
    '4,200 ₪'
    """
    known = get_currency(currency)
    symbol = known.symbol if known else currency
    if amount == int(amount):
        number = f"{int(amount):,}"
    else:
        number = f"{amount:,.2f}".rstrip("0").rstrip(".")
    return f"{number} {symbol}"


format_price = format_currency


def format_date(value: str | datetime) -> str:
    date = _to_datetime(value)
    return f"{date.day} {ARABIC_MONTHS[date.month - 1]} {date.year}"


def format_time(value: str | datetime) -> str:
    return _to_datetime(value).strftime("%H:%M")


def format_relative_time(value: str | datetime, now: datetime | None = None) -> str:
    date = _to_datetime(value)
    if date.tzinfo is None:
        date = date.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)

    diff_seconds = (now - date).total_seconds()
    minutes = math.floor(diff_seconds / 60)
    hours = math.floor(diff_seconds / 3600)
    days = math.floor(diff_seconds / 86400)

    if minutes < 1:
        return "الآن"
    if minutes < 60:
        return f"منذ {minutes} دقيقة"
    if hours < 24:
        return f"منذ {hours} ساعة"
    if days < 7:
        return f"منذ {days} يوم"
    return format_date(date)


def format_phone_number(phone: str) -> str:
    """Group Palestinian mobile numbers; leave anything else untouched."""
    cleaned = _NON_DIGITS.sub("", phone)

    if cleaned.startswith("970") and len(cleaned) == 12:
        return f"+970 {cleaned[3:5]} {cleaned[5:8]} {cleaned[8:]}"

    if cleaned.startswith("05") and len(cleaned) == 10:
        return f"{cleaned[:3]} {cleaned[3:6]} {cleaned[6:]}"

    return phone


def format_file_size(size: int) -> str:
    """Human-readable size in Arabic units, e.g. ``1536`` -> ``1.5 كيلوبايت``."""
    if size <= 0:
        return f"0 {FILE_SIZE_UNITS[0]}"

    value = float(size)
    index = 0
    while value >= 1024 and index < len(FILE_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{_trim_number(value)} {FILE_SIZE_UNITS[index]}"
