from __future__ import annotations

import logging
from datetime import date

from pydantic import ValidationError

from roomtable.core.exceptions import InvalidDecisionError
from roomtable.schemas.schedule import ScheduleEntry, ScheduleEntryCreate
from roomtable.schemas.timetable import CANCELED_COURSE_NAME, ExceptionDecision
from roomtable.services.repository import ScheduleRepository
from roomtable.services.schedule_view import ScheduleView
from roomtable.services.time_normalizer import normalize_time, weekday_of

logger = logging.getLogger(__name__)


def _required_text(value: str | None, field_name: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise InvalidDecisionError(f"{field_name} is required", details={"field": field_name})
    return trimmed


def _single_date_entry(
    *,
    room_id: str | None,
    room_name: str | None,
    day: date,
    start_time: str,
    end_time: str,
    course_name: str,
    lecturer: str,
) -> ScheduleEntryCreate:
    try:
        return ScheduleEntryCreate(
            room_id=room_id,
            room_name=room_name,
            course_name=course_name,
            lecturer=lecturer,
            start_time=start_time,
            end_time=end_time,
            weekdays=[weekday_of(day)],
            effective_from=day,
            effective_to=day,
            is_exception=True,
            enabled=True,
        )
    except ValidationError as exc:
        raise InvalidDecisionError(
            "Exception entry is invalid",
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc


def build_exception(decision: ExceptionDecision) -> ScheduleEntryCreate:
    """Construct the single-date exception a cancel/replace decision stands for."""
    target = decision.target_entry
    if decision.action == "cancel":
        course_name, lecturer = CANCELED_COURSE_NAME, ""
    elif decision.action == "replace":
        course_name = _required_text(decision.new_course_name, "newCourseName")
        lecturer = _required_text(decision.new_lecturer, "newLecturer")
    else:
        raise InvalidDecisionError(f"Unsupported action {decision.action!r}")

    return _single_date_entry(
        room_id=target.room_id,
        room_name=target.room_name,
        day=decision.day,
        start_time=target.start_time,
        end_time=target.end_time,
        course_name=course_name,
        lecturer=lecturer,
    )


class ExceptionLifecycleManager:
    """Turns decisions on resolved cells into persisted exception entries.

    Recurring entries are never touched; an exception only shadows its
    target on the one date it carries.
    """

    def __init__(self, repository: ScheduleRepository):
        self.repository = repository

    def apply_decision(self, decision: ExceptionDecision) -> ScheduleEntry:
        payload = build_exception(decision)
        created = self.repository.create_entry(payload)
        logger.info(
            "Recorded %s exception %s for entry %s on %s",
            decision.action,
            created.id,
            decision.target_entry.id,
            decision.day.isoformat(),
        )
        return created

    def apply_to_view(self, view: ScheduleView, decision: ExceptionDecision) -> tuple[ScheduleEntry, ScheduleView]:
        created = self.apply_decision(decision)
        return created, view.with_entry(created)

    def schedule_makeup(
        self,
        room_id: str,
        day: date,
        start_time: str,
        end_time: str,
        course_name: str,
        lecturer: str = "",
    ) -> ScheduleEntry:
        """Book a one-off class into a free slot of ``room_id`` on ``day``."""
        start = normalize_time(start_time)
        end = normalize_time(end_time)
        if end <= start:
            raise InvalidDecisionError("End time must be after start time", details={"start": start, "end": end})

        payload = _single_date_entry(
            room_id=room_id,
            room_name=None,
            day=day,
            start_time=start,
            end_time=end,
            course_name=_required_text(course_name, "courseName"),
            lecturer=(lecturer or "").strip(),
        )
        created = self.repository.create_entry(payload)
        logger.info("Recorded make-up exception %s in room %s on %s", created.id, room_id, day.isoformat())
        return created
