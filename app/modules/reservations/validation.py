"""Day-filter validation.

A day filter is a `YYYY-MM-DD` string naming a real calendar day. It selects
the half-open UTC interval [day 00:00, next day 00:00).
"""

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Tuple

DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DateFilterError(ValueError):
    """Raised when a day filter is not a valid YYYY-MM-DD calendar date."""


def is_valid_date_format(value: Any) -> bool:
    """Return True for `YYYY-MM-DD` strings naming an existing day.

    The parsed date must round-trip to the same string, which rejects
    impossible days such as 2024-02-30.
    """
    if not value or not isinstance(value, str):
        return False
    if not DATE_REGEX.match(value):
        return False
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return False
    return parsed.isoformat() == value


def parse_day(value: str) -> date:
    if not is_valid_date_format(value):
        raise DateFilterError(f"Invalid date format. Use YYYY-MM-DD: {value!r}")
    return date.fromisoformat(value)


def day_bounds(value: str) -> Tuple[datetime, datetime]:
    """UTC start (inclusive) and end (exclusive) of the given day.

    Raises:
        DateFilterError: If the value is not a valid day.
    """
    day = parse_day(value)
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)
