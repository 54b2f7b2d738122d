from __future__ import annotations

import datetime as dt
from typing import Iterator, Literal

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from roomtable.schemas.schedule import ScheduleEntry, coerce_time

CANCELED_COURSE_NAME = "Canceled"
CANCELLATION_MARKERS = frozenset({"canceled", "cancelled"})

CellKind = Literal["regular", "exception", "empty"]


def is_cancellation_name(course_name: str | None) -> bool:
    return (course_name or "").strip().casefold() in CANCELLATION_MARKERS


class Period(BaseModel):
    index: int = Field(ge=1)
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    session: Literal["morning", "afternoon", "evening"] | None = None

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, value: object) -> str:
        return coerce_time(value)

    @model_validator(mode="after")
    def validate_order(self) -> "Period":
        if self.end_time <= self.start_time:
            raise ValueError(f"Period {self.index} must end after it starts")
        return self


class ResolvedCell(BaseModel):
    entry: ScheduleEntry | None = None
    kind: CellKind = "empty"

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_kind(self) -> "ResolvedCell":
        if (self.entry is None) != (self.kind == "empty"):
            raise ValueError("Only empty cells may omit the schedule entry")
        return self

    @property
    def is_empty(self) -> bool:
        return self.entry is None

    @computed_field(alias="isCancellation")
    @property
    def is_cancellation(self) -> bool:
        return self.kind == "exception" and is_cancellation_name(self.entry.course_name)


class SpanBlock(BaseModel):
    day: dt.date = Field(alias="date")
    start_period_index: int = Field(alias="startPeriodIndex", ge=1)
    period_span: int = Field(default=1, alias="periodSpan", ge=1)
    cell: ResolvedCell

    model_config = {"populate_by_name": True}

    @property
    def end_period_index(self) -> int:
        return self.start_period_index + self.period_span - 1


class WeekGrid(BaseModel):
    """Period x weekday matrix for one displayed week.

    ``rows[p][d]`` holds the block starting at period ``p`` on day ``d``, or
    None when that slot is covered by a block from an earlier period.
    """

    week_start: dt.date = Field(alias="weekStart")
    dates: list[dt.date]
    periods: list[Period]
    rows: list[list[SpanBlock | None]]

    model_config = {"populate_by_name": True}

    def blocks(self) -> Iterator[SpanBlock]:
        for row in self.rows:
            for block in row:
                if block is not None:
                    yield block

    def block_at(self, period_index: int, day_offset: int) -> SpanBlock | None:
        return self.rows[period_index - 1][day_offset]

    def column(self, day_offset: int) -> list[SpanBlock]:
        return [row[day_offset] for row in self.rows if row[day_offset] is not None]


class ExceptionDecision(BaseModel):
    action: Literal["cancel", "replace"]
    target_entry: ScheduleEntry = Field(alias="targetEntry")
    day: dt.date = Field(alias="date")
    new_course_name: str | None = Field(default=None, alias="newCourseName", max_length=200)
    new_lecturer: str | None = Field(default=None, alias="newLecturer", max_length=200)

    model_config = {"populate_by_name": True}


class ExceptionDecisionRequest(BaseModel):
    action: Literal["cancel", "replace"]
    target_entry_id: str = Field(alias="targetEntryId", min_length=1, max_length=64)
    day: dt.date = Field(alias="date")
    new_course_name: str | None = Field(default=None, alias="newCourseName", max_length=200)
    new_lecturer: str | None = Field(default=None, alias="newLecturer", max_length=200)

    model_config = {"populate_by_name": True}


class MakeupRequest(BaseModel):
    day: dt.date = Field(alias="date")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    course_name: str = Field(alias="courseName", max_length=200)
    lecturer: str = Field(default="", max_length=200)

    model_config = {"populate_by_name": True}
