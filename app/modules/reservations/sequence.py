"""Cubicle sequence compression.

Renders the cubicles a user reserved as compact text. Reservations are
grouped per calendar day and runs of consecutive cubicles in the same
section and row collapse into a `start-end` range:

    A1-SOC CUB1, A1-SOC CUB2, A1-SOC CUB3, B2-SOC CUB7
    -> "A1-SOC CUB1-A1-SOC CUB3, B2-SOC CUB7"

Serials are ordered as plain strings, so "CUB10" sorts before "CUB2" and
such pairs never form a run.
"""

import re
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple, Union

from modules.reservations.models import to_utc

CUBICLE_CODE_REGEX = re.compile(r"([ABC])(\d+)-SOC CUB(\d+)")

DayLike = Union[date, datetime, str]


def is_sequential_code(first: str, second: str) -> bool:
    """True when `second` is the cubicle right after `first` in the same row.

    >>> is_sequential_code("A1-SOC CUB1", "A1-SOC CUB2")
    True
    >>> is_sequential_code("A1-SOC CUB2", "A1-SOC CUB1")
    False
    """
    match1 = CUBICLE_CODE_REGEX.search(first)
    match2 = CUBICLE_CODE_REGEX.search(second)
    if not match1 or not match2:
        return False

    section1, row1, num1 = match1.groups()
    section2, row2, num2 = match2.groups()
    return section1 == section2 and row1 == row2 and int(num2) == int(num1) + 1


def _day_key(value: DayLike) -> str:
    # ISO keys sort chronologically as strings.
    if isinstance(value, datetime):
        return to_utc(value).date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def _compress_day(codes: List[str]) -> List[str]:
    runs: List[str] = []
    start = end = codes[0]
    for code in codes[1:]:
        if is_sequential_code(end, code):
            end = code
            continue
        runs.append(start if start == end else f"{start}-{end}")
        start = end = code
    runs.append(start if start == end else f"{start}-{end}")
    return runs


def compress(records: Iterable[Tuple[DayLike, Optional[str]]]) -> str:
    """Compress (day, cubicle serial) pairs into sequence text.

    Records without a serial are ignored. Runs never cross a day boundary.

    Args:
        records: Pairs of reservation day (date, datetime or ISO string) and
            cubicle serial.

    Returns:
        Comma separated runs, ordered by day then serial. Empty when no
        record carries a serial.
    """
    by_day: Dict[str, List[str]] = defaultdict(list)
    for day, serial in records:
        if not serial:
            continue
        by_day[_day_key(day)].append(serial)

    tokens: List[str] = []
    for key in sorted(by_day):
        tokens.extend(_compress_day(sorted(by_day[key])))
    return ", ".join(tokens)
