from __future__ import annotations

from datetime import date, time, timedelta
from typing import Iterable

from roomtable.core.exceptions import MalformedTimeError

WEEKDAY_CODES: tuple[str, ...] = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")

DAY_NAME_TO_CODE = {
    "MONDAY": "MON",
    "TUESDAY": "TUE",
    "WEDNESDAY": "WED",
    "THURSDAY": "THU",
    "FRIDAY": "FRI",
    "SATURDAY": "SAT",
    "SUNDAY": "SUN",
}

_COMPONENT_LIMITS = (23, 59, 59)


def normalize_time(value: str | time) -> str:
    """Canonicalize a time-of-day to ``HH:MM:SS``.

    Accepts ``H:M``, ``HH:MM`` and ``HH:MM:SS`` strings (missing seconds are
    padded with zero) or a ``datetime.time``. Anything else raises
    MalformedTimeError.
    """
    if isinstance(value, time):
        return value.replace(microsecond=0).isoformat()
    if not isinstance(value, str):
        raise MalformedTimeError(value)

    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise MalformedTimeError(value)

    components: list[int] = []
    for part, limit in zip(parts, _COMPONENT_LIMITS):
        if not (part.isascii() and part.isdigit()) or len(part) > 2:
            raise MalformedTimeError(value)
        number = int(part)
        if number > limit:
            raise MalformedTimeError(value)
        components.append(number)
    while len(components) < 3:
        components.append(0)

    hours, minutes, seconds = components
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def weekday_of(day: date) -> str:
    return WEEKDAY_CODES[day.weekday()]


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_dates(start: date) -> list[date]:
    return [start + timedelta(days=offset) for offset in range(7)]


def parse_weekdays(value: str | Iterable[str] | None) -> list[str]:
    """Parse a weekday set from a list or a comma-separated string.

    Returns unique codes in MON..SUN order. Full English day names are
    accepted as well as the three-letter codes.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw_items = value.split(",")
    else:
        raw_items = list(value)

    codes: set[str] = set()
    invalid: list[str] = []
    for item in raw_items:
        token = str(item).strip().upper()
        if not token:
            continue
        code = DAY_NAME_TO_CODE.get(token, token)
        if code not in WEEKDAY_CODES:
            invalid.append(str(item).strip())
            continue
        codes.add(code)
    if invalid:
        raise ValueError(f"Invalid weekday value(s): {', '.join(invalid)}")
    return [code for code in WEEKDAY_CODES if code in codes]
