from __future__ import annotations

from datetime import date
from typing import Iterable

from roomtable.schemas.schedule import ScheduleEntry
from roomtable.schemas.timetable import ResolvedCell, SpanBlock, WeekGrid
from roomtable.services.cell_resolver import resolve_cell
from roomtable.services.periods import PeriodCatalog, get_period_catalog
from roomtable.services.time_normalizer import normalize_time, week_dates


def _span_length(cell: ResolvedCell, catalog: PeriodCatalog, row: int) -> int:
    """Count the periods from ``row`` onwards that the resolved entry still occupies."""
    entry_end = normalize_time(cell.entry.end_time)
    periods = catalog.periods
    span = 1
    for next_row in range(row + 1, len(periods)):
        if entry_end > periods[next_row].start_time:
            span += 1
        else:
            break
    return span


def build_week(
    week_start_date: date,
    entries: Iterable[ScheduleEntry],
    *,
    catalog: PeriodCatalog | None = None,
    room_id: str | None = None,
) -> WeekGrid:
    catalog = catalog or get_period_catalog()
    entries = tuple(entries)
    dates = week_dates(week_start_date)
    periods = catalog.periods

    # (day offset, row) slots already covered by a block from an earlier row
    consumed: set[tuple[int, int]] = set()
    rows: list[list[SpanBlock | None]] = []

    for row, period in enumerate(periods):
        row_blocks: list[SpanBlock | None] = []
        for offset, day in enumerate(dates):
            if (offset, row) in consumed:
                row_blocks.append(None)
                continue

            cell = resolve_cell(day, period.start_time, period.end_time, entries, room_id=room_id)
            span = 1
            if not cell.is_empty:
                span = _span_length(cell, catalog, row)
                consumed.update((offset, covered) for covered in range(row + 1, row + span))

            row_blocks.append(
                SpanBlock(day=day, start_period_index=period.index, period_span=span, cell=cell)
            )
        rows.append(row_blocks)

    return WeekGrid(week_start=week_start_date, dates=dates, periods=list(periods), rows=rows)
