from datetime import date

from fastapi import APIRouter, Depends, Query, status

from roomtable.api.deps import get_catalog, get_repository
from roomtable.core.exceptions import ResourceNotFoundError
from roomtable.schemas.schedule import ScheduleEntry
from roomtable.schemas.timetable import (
    ExceptionDecision,
    ExceptionDecisionRequest,
    MakeupRequest,
    Period,
    ResolvedCell,
    WeekGrid,
)
from roomtable.services.cell_resolver import resolve_cell
from roomtable.services.exception_manager import ExceptionLifecycleManager
from roomtable.services.grid_builder import build_week
from roomtable.services.periods import PeriodCatalog
from roomtable.services.schedule_store import SqlScheduleRepository
from roomtable.services.schedule_view import ScheduleView
from roomtable.services.time_normalizer import week_start

router = APIRouter()


@router.get("/periods", response_model=list[Period])
def list_periods(catalog: PeriodCatalog = Depends(get_catalog)) -> list[Period]:
    return list(catalog)


@router.get("/rooms/{room_id}/timetable", response_model=WeekGrid)
def get_week_timetable(
    room_id: str,
    day: date | None = Query(default=None, alias="date"),
    repository: SqlScheduleRepository = Depends(get_repository),
    catalog: PeriodCatalog = Depends(get_catalog),
) -> WeekGrid:
    view = ScheduleView.load(repository, room_id)
    return build_week(week_start(day or date.today()), view, catalog=catalog, room_id=room_id)


@router.get("/rooms/{room_id}/timetable/cell", response_model=ResolvedCell)
def get_timetable_cell(
    room_id: str,
    day: date = Query(alias="date"),
    period: int = Query(ge=1),
    repository: SqlScheduleRepository = Depends(get_repository),
    catalog: PeriodCatalog = Depends(get_catalog),
) -> ResolvedCell:
    try:
        slot = catalog.get(period)
    except KeyError:
        raise ResourceNotFoundError("Period", str(period)) from None
    view = ScheduleView.load(repository, room_id)
    return resolve_cell(day, slot.start_time, slot.end_time, view, room_id=room_id)


@router.post("/rooms/{room_id}/exceptions", response_model=ScheduleEntry, status_code=status.HTTP_201_CREATED)
def create_exception(
    room_id: str,
    payload: ExceptionDecisionRequest,
    repository: SqlScheduleRepository = Depends(get_repository),
) -> ScheduleEntry:
    view = ScheduleView.load(repository, room_id)
    target = view.get(payload.target_entry_id)
    if target is None:
        raise ResourceNotFoundError("Schedule entry", payload.target_entry_id)

    decision = ExceptionDecision(
        action=payload.action,
        target_entry=target,
        day=payload.day,
        new_course_name=payload.new_course_name,
        new_lecturer=payload.new_lecturer,
    )
    return ExceptionLifecycleManager(repository).apply_decision(decision)


@router.post("/rooms/{room_id}/makeup", response_model=ScheduleEntry, status_code=status.HTTP_201_CREATED)
def create_makeup_class(
    room_id: str,
    payload: MakeupRequest,
    repository: SqlScheduleRepository = Depends(get_repository),
) -> ScheduleEntry:
    return ExceptionLifecycleManager(repository).schedule_makeup(
        room_id,
        payload.day,
        payload.start_time,
        payload.end_time,
        payload.course_name,
        payload.lecturer,
    )
