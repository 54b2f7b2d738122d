from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from roomtable.api.deps import get_repository
from roomtable.core.exceptions import InvalidEntryError, ResourceNotFoundError
from roomtable.schemas.schedule import ScheduleEntry, ScheduleEntryCreate
from roomtable.services.schedule_store import SqlScheduleRepository

router = APIRouter()


@router.get("/schedules", response_model=list[ScheduleEntry])
def list_schedules(
    room_id: str | None = Query(default=None, alias="roomId"),
    repository: SqlScheduleRepository = Depends(get_repository),
) -> list[ScheduleEntry]:
    return repository.list_entries(room_id)


@router.post("/rooms/{room_id}/schedules", response_model=ScheduleEntry, status_code=status.HTTP_201_CREATED)
def create_schedule(
    room_id: str,
    payload: ScheduleEntryCreate,
    repository: SqlScheduleRepository = Depends(get_repository),
) -> ScheduleEntry:
    try:
        scoped = ScheduleEntryCreate.model_validate({**payload.model_dump(), "room_id": room_id})
    except ValidationError as exc:
        raise InvalidEntryError(
            "Schedule entry is invalid",
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc
    return repository.create_entry(scoped)


@router.delete("/schedules/{entry_id}")
def delete_schedule(
    entry_id: str,
    repository: SqlScheduleRepository = Depends(get_repository),
) -> dict:
    if not repository.delete_entry(entry_id):
        raise ResourceNotFoundError("Schedule entry", entry_id)
    return {"success": True}
