from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Iterator

from roomtable.core.config import get_settings
from roomtable.core.exceptions import ConfigurationError
from roomtable.schemas.timetable import Period
from roomtable.services.time_normalizer import normalize_time

# Daily class periods; breaks fall between 3/4, 6/7, 9/10 and 12/13.
BUILTIN_PERIODS: tuple[Period, ...] = (
    Period(index=1, start_time="06:50", end_time="07:40", session="morning"),
    Period(index=2, start_time="07:40", end_time="08:30", session="morning"),
    Period(index=3, start_time="08:30", end_time="09:20", session="morning"),
    Period(index=4, start_time="09:30", end_time="10:20", session="morning"),
    Period(index=5, start_time="10:20", end_time="11:10", session="morning"),
    Period(index=6, start_time="11:10", end_time="12:00", session="morning"),
    Period(index=7, start_time="12:45", end_time="13:35", session="afternoon"),
    Period(index=8, start_time="13:35", end_time="14:25", session="afternoon"),
    Period(index=9, start_time="14:25", end_time="15:15", session="afternoon"),
    Period(index=10, start_time="15:25", end_time="16:15", session="afternoon"),
    Period(index=11, start_time="16:15", end_time="17:05", session="afternoon"),
    Period(index=12, start_time="17:05", end_time="17:55", session="afternoon"),
    Period(index=13, start_time="18:05", end_time="18:55", session="evening"),
    Period(index=14, start_time="18:55", end_time="19:45", session="evening"),
    Period(index=15, start_time="19:45", end_time="20:35", session="evening"),
    Period(index=16, start_time="20:35", end_time="21:25", session="evening"),
)


class PeriodCatalog:
    """Ordered, read-only table of class periods."""

    def __init__(self, periods: Iterable[Period]):
        self._periods: tuple[Period, ...] = tuple(periods)
        if not self._periods:
            raise ConfigurationError("Period catalog cannot be empty")

        previous: Period | None = None
        for position, period in enumerate(self._periods, start=1):
            if period.index != position:
                raise ConfigurationError(
                    f"Period indexes must run 1..N in order; found {period.index} at position {position}"
                )
            if previous is not None and period.start_time < previous.end_time:
                raise ConfigurationError(f"Period {period.index} overlaps period {previous.index}")
            previous = period

    def __iter__(self) -> Iterator[Period]:
        return iter(self._periods)

    def __len__(self) -> int:
        return len(self._periods)

    @property
    def periods(self) -> tuple[Period, ...]:
        return self._periods

    def get(self, index: int) -> Period:
        if not 1 <= index <= len(self._periods):
            raise KeyError(index)
        return self._periods[index - 1]

    def covering(self, start_time: str, end_time: str) -> list[Period]:
        """Periods whose range overlaps ``[start_time, end_time)``."""
        start = normalize_time(start_time)
        end = normalize_time(end_time)
        return [period for period in self._periods if period.start_time < end and period.end_time > start]

    def period_range(self, start_time: str, end_time: str) -> tuple[int, int] | None:
        covered = self.covering(start_time, end_time)
        if not covered:
            return None
        return covered[0].index, covered[-1].index


def build_catalog(period_count: int) -> PeriodCatalog:
    if not 1 <= period_count <= len(BUILTIN_PERIODS):
        raise ConfigurationError(
            f"period_count must be between 1 and {len(BUILTIN_PERIODS)}, got {period_count}"
        )
    return PeriodCatalog(BUILTIN_PERIODS[:period_count])


@lru_cache
def get_period_catalog() -> PeriodCatalog:
    return build_catalog(get_settings().period_count)
