"""Calendar helpers over ``YYYY-MM`` month tokens.

Month tokens are zero padded so they compare correctly as plain strings.
Every function validates its tokens and raises
:class:`~household_budget.exceptions.InvalidMonthError` on malformed input.
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional

from .exceptions import InvalidMonthError
from .settings import get_config_value

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")

PRESET_LENGTHS = {
    '3months': 3,
    '6months': 6,
    '12months': 12,
}


def parse_month(month: str) -> tuple[int, int]:
    """Split a month token into ``(year, month)`` integers."""
    if not isinstance(month, str) or not MONTH_PATTERN.match(month):
        raise InvalidMonthError(f"Invalid month token {month!r}, expected YYYY-MM")
    year, month_num = int(month[:4]), int(month[5:])
    if not 1 <= month_num <= 12:
        raise InvalidMonthError(f"Invalid month token {month!r}, month must be 01-12")
    return year, month_num


def _format(year: int, month_num: int) -> str:
    return f"{year:04d}-{month_num:02d}"


def previous_month(month: str) -> str:
    year, month_num = parse_month(month)
    month_num -= 1
    if month_num < 1:
        month_num = 12
        year -= 1
    return _format(year, month_num)


def next_month(month: str) -> str:
    year, month_num = parse_month(month)
    month_num += 1
    if month_num > 12:
        month_num = 1
        year += 1
    return _format(year, month_num)


def months_in_range(start: str, end: str) -> Iterator[str]:
    """Yield every month from ``start`` to ``end`` inclusive.

    Nothing is yielded when ``start`` is after ``end``.
    """
    parse_month(start)
    parse_month(end)
    current = start
    while current <= end:
        yield current
        current = next_month(current)


def current_month() -> str:
    """Today's month in UTC."""
    return datetime.now(timezone.utc).strftime('%Y-%m')


def month_of(date: str) -> str:
    """Month token of an ISO ``YYYY-MM-DD`` date."""
    return date[:7]


def format_month_display(month: str) -> str:
    """Human label such as ``January 2025``."""
    year, month_num = parse_month(month)
    return f"{calendar.month_name[month_num]} {year}"


def is_current_month(month: str) -> bool:
    return month == current_month()


def is_future_month(month: str) -> bool:
    parse_month(month)
    return month > current_month()


# ---------------------------------------------------------------------------
# Date ranges
# ---------------------------------------------------------------------------


def preset_range(preset: str) -> Dict[str, str]:
    """Return ``{'start', 'end'}`` for a named preset ending this month.

    Supported presets are ``3months``, ``6months`` and ``12months``.
    """
    if preset not in PRESET_LENGTHS:
        raise ValueError(f"Unknown range preset '{preset}'")
    end = current_month()
    start = end
    for _ in range(PRESET_LENGTHS[preset] - 1):
        start = previous_month(start)
    return {'start': start, 'end': end}


def validate_date_range(start: str, end: str) -> bool:
    """True when both tokens are well formed and ``start <= end``."""
    try:
        parse_month(start)
        parse_month(end)
    except InvalidMonthError:
        return False
    return start <= end


def normalize_date_range(start: str, end: str) -> Dict[str, str]:
    """Swap a reversed range so that ``start <= end``."""
    parse_month(start)
    parse_month(end)
    if start > end:
        return {'start': end, 'end': start}
    return {'start': start, 'end': end}


def format_month_range(start: str, end: str) -> str:
    return f"{format_month_display(start)} - {format_month_display(end)}"


def month_list(start: str, end: str) -> List[str]:
    return list(months_in_range(start, end))


def month_count(start: str, end: str) -> int:
    return len(month_list(start, end))


def is_large_range(start: str, end: str, threshold: Optional[int] = None) -> bool:
    if threshold is None:
        threshold = get_config_value('budget', 'analytics', 'large_range_months', default=12)
    return month_count(start, end) > threshold


def has_enough_data_for_trends(start: str, end: str, minimum: Optional[int] = None) -> bool:
    if minimum is None:
        minimum = get_config_value('budget', 'analytics', 'min_trend_months', default=2)
    return month_count(start, end) >= minimum


def previous_full_month() -> str:
    return previous_month(current_month())


def is_month_in_range(start: str, end: str, month: str) -> bool:
    return start <= month <= end
