from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from roomtable.core.exceptions import MalformedTimeError
from roomtable.schemas.schedule import ScheduleEntry
from roomtable.schemas.timetable import ResolvedCell
from roomtable.services.time_normalizer import normalize_time, weekday_of

logger = logging.getLogger(__name__)

OPEN_RANGE_START = date(1900, 1, 1)
OPEN_RANGE_END = date(2099, 12, 31)


def _time_matches(
    entries: Iterable[ScheduleEntry],
    period_start: str,
    period_end: str,
    room_id: str | None,
) -> list[ScheduleEntry]:
    matches: list[ScheduleEntry] = []
    for entry in entries:
        if not entry.visible_from(room_id):
            continue
        try:
            entry_start = normalize_time(entry.start_time)
            entry_end = normalize_time(entry.end_time)
        except MalformedTimeError:
            logger.warning("Skipping schedule entry %s with malformed time range", entry.id)
            continue
        # Half-open overlap: [entry_start, entry_end) vs [period_start, period_end)
        if entry_start < period_end and entry_end > period_start:
            matches.append(entry)
    return matches


def _is_regular_on(entry: ScheduleEntry, day: date, weekday: str) -> bool:
    if entry.is_exception or entry.enabled is False:
        return False
    if weekday not in entry.weekdays:
        return False
    effective_from = entry.effective_from or OPEN_RANGE_START
    effective_to = entry.effective_to or OPEN_RANGE_END
    return effective_from <= day <= effective_to


def resolve_cell(
    day: date,
    period_start: str,
    period_end: str,
    entries: Iterable[ScheduleEntry],
    *,
    room_id: str | None = None,
) -> ResolvedCell:
    """Find the single schedule entry in effect for one date and period.

    A single-date exception overlapping the period wins over any recurring
    entry. Otherwise the first enabled recurring entry whose weekday set and
    validity window contain ``day`` is returned. When several entries
    qualify, the first one in iteration order is used.
    """
    start = normalize_time(period_start)
    end = normalize_time(period_end)
    matches = _time_matches(entries, start, end, room_id)

    for entry in matches:
        if entry.is_exception and entry.effective_from == day:
            return ResolvedCell(entry=entry, kind="exception")

    weekday = weekday_of(day)
    for entry in matches:
        if _is_regular_on(entry, day, weekday):
            return ResolvedCell(entry=entry, kind="regular")

    return ResolvedCell(entry=None, kind="empty")
