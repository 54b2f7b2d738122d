from __future__ import annotations

from typing import Protocol

from roomtable.schemas.schedule import ScheduleEntry, ScheduleEntryCreate


class ScheduleRepository(Protocol):
    """Read/write store of schedule entries.

    ``list_entries`` returns entries in an order that is consistent within one
    call. ``create_entry`` persists a new entry and returns it with its
    store-assigned id. Failures surface as RepositoryError.
    """

    def list_entries(self, room_id: str | None = None) -> list[ScheduleEntry]: ...

    def create_entry(self, payload: ScheduleEntryCreate) -> ScheduleEntry: ...

    def delete_entry(self, entry_id: str) -> bool: ...
