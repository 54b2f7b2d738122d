from __future__ import annotations

from datetime import date

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from roomtable.core.exceptions import MalformedTimeError
from roomtable.services.time_normalizer import normalize_time, parse_weekdays

# Room ids the store uses for entries not yet attached to a room.
UNSCOPED_ROOM_IDS = {"", "Unknown"}


def coerce_time(value: object) -> str:
    try:
        return normalize_time(value)
    except MalformedTimeError as exc:
        raise ValueError(exc.message) from exc


class ScheduleEntryBase(BaseModel):
    room_id: str | None = Field(default=None, alias="roomId", max_length=36)
    room_name: str | None = Field(default=None, alias="roomName", max_length=100)
    course_name: str = Field(alias="courseName", min_length=1, max_length=200)
    lecturer: str = Field(default="", max_length=200)
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    weekdays: list[str] = Field(default_factory=list, max_length=7)
    effective_from: date | None = Field(default=None, alias="effectiveFrom")
    effective_to: date | None = Field(default=None, alias="effectiveTo")
    is_exception: bool = Field(default=False, alias="isException")
    enabled: bool = Field(default=True, validation_alias=AliasChoices("enabled", "isEnabled"))

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    @field_validator("course_name")
    @classmethod
    def normalize_course_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Course name cannot be empty")
        return trimmed

    @field_validator("lecturer", mode="before")
    @classmethod
    def normalize_lecturer(cls, value: str | None) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, value: object) -> str:
        return coerce_time(value)

    @field_validator("weekdays", mode="before")
    @classmethod
    def normalize_weekdays(cls, value: object) -> list[str]:
        return parse_weekdays(value)

    @field_validator("is_exception", mode="before")
    @classmethod
    def default_is_exception(cls, value: object) -> object:
        return False if value is None else value

    @field_validator("enabled", mode="before")
    @classmethod
    def default_enabled(cls, value: object) -> object:
        return True if value is None else value

    @model_validator(mode="after")
    def validate_ranges(self) -> "ScheduleEntryBase":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")

        if self.is_exception:
            if self.effective_from is None:
                self.effective_from = self.effective_to
            if self.effective_from is None:
                raise ValueError("Exception entries require effectiveFrom")
            if self.effective_to is None:
                self.effective_to = self.effective_from
            if self.effective_to != self.effective_from:
                raise ValueError("Exception entries must apply to a single date")
        elif (
            self.effective_from is not None
            and self.effective_to is not None
            and self.effective_from > self.effective_to
        ):
            raise ValueError("effectiveFrom must not be after effectiveTo")
        return self

    @property
    def is_unscoped(self) -> bool:
        return self.room_id is None or self.room_id in UNSCOPED_ROOM_IDS

    def visible_from(self, room_id: str | None) -> bool:
        if room_id is None or self.is_unscoped:
            return True
        return self.room_id == room_id


class ScheduleEntryCreate(ScheduleEntryBase):
    pass


class ScheduleEntry(ScheduleEntryBase):
    id: str = Field(min_length=1, max_length=64)
