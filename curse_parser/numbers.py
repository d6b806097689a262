"""
Locale-aware number and timestamp parsing.

The site renders counters with thousands separators ("1,234") and shows a
zero count as a dash ("-"). Timestamps are Unix epoch seconds.
"""

import re
from datetime import datetime, timezone

from .exceptions import MalformedNumberError

# Characters used as thousands separators in rendered counters
THOUSANDS_SEPARATORS = (",", "\u00a0", "\u202f")

ZERO_TOKEN = "-"

UINT64_MAX = 2 ** 64 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# int() alone would also accept "1_000", " 12 " and non-ASCII digits
_UNSIGNED_PATTERN = re.compile(r"[0-9]+")
_SIGNED_PATTERN = re.compile(r"[+-]?[0-9]+")


def _strip_separators(text: str) -> str:
    for sep in THOUSANDS_SEPARATORS:
        text = text.replace(sep, "")
    return text


def parse_unsigned(text: str) -> int:
    """Parse a non-negative base-10 integer that fits in 64 bits."""
    trimmed = text.strip()
    if trimmed == ZERO_TOKEN:
        return 0

    digits = _strip_separators(trimmed)
    if not _UNSIGNED_PATTERN.fullmatch(digits):
        raise MalformedNumberError(text)

    value = int(digits)
    if value > UINT64_MAX:
        raise MalformedNumberError(text, "value out of range")
    return value


def parse_signed(text: str) -> int:
    """Parse a base-10 integer with an optional leading sign that fits in 64 bits."""
    trimmed = text.strip()
    if trimmed == ZERO_TOKEN:
        return 0

    digits = _strip_separators(trimmed)
    if not _SIGNED_PATTERN.fullmatch(digits):
        raise MalformedNumberError(text)

    value = int(digits)
    if not INT64_MIN <= value <= INT64_MAX:
        raise MalformedNumberError(text, "value out of range")
    return value


def parse_unix_timestamp(text: str) -> datetime:
    """Parse Unix epoch seconds into a timezone-aware UTC datetime."""
    seconds = parse_signed(text)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedNumberError(text, f"timestamp out of range: {e}") from e


def format_with_separators(value: int, separator: str = ",") -> str:
    """Render an integer with standard three-digit grouping."""
    return f"{value:,}".replace(",", separator)
