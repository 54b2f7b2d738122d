from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Iterator, Mapping

from pydantic import ValidationError

from roomtable.schemas.schedule import ScheduleEntry
from roomtable.services.repository import ScheduleRepository

logger = logging.getLogger(__name__)


def parse_entries(records: Iterable[Mapping[str, Any]]) -> list[ScheduleEntry]:
    """Validate raw store records, dropping the ones that cannot be parsed."""
    entries: list[ScheduleEntry] = []
    for record in records:
        try:
            entries.append(ScheduleEntry.model_validate(record))
        except ValidationError as exc:
            record_id = record.get("id") if isinstance(record, Mapping) else None
            logger.warning(
                "Skipping malformed schedule record %s: %s",
                record_id,
                "; ".join(error["msg"] for error in exc.errors()),
            )
    return entries


@dataclass(frozen=True)
class ScheduleView:
    """Snapshot of the schedule entries visible from one room.

    The view never changes in place: ``with_entry`` and ``refresh`` return a
    new snapshot.
    """

    room_id: str | None = None
    entries: tuple[ScheduleEntry, ...] = field(default_factory=tuple)

    @classmethod
    def load(cls, repository: ScheduleRepository, room_id: str | None = None) -> "ScheduleView":
        entries = repository.list_entries(room_id)
        return cls(room_id=room_id, entries=tuple(entry for entry in entries if entry.visible_from(room_id)))

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], room_id: str | None = None) -> "ScheduleView":
        entries = parse_entries(records)
        return cls(room_id=room_id, entries=tuple(entry for entry in entries if entry.visible_from(room_id)))

    def __iter__(self) -> Iterator[ScheduleEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, entry_id: str) -> ScheduleEntry | None:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def exceptions_on(self, day: date) -> list[ScheduleEntry]:
        return [entry for entry in self.entries if entry.is_exception and entry.effective_from == day]

    def with_entry(self, entry: ScheduleEntry) -> "ScheduleView":
        return ScheduleView(room_id=self.room_id, entries=(*self.entries, entry))

    def refresh(self, repository: ScheduleRepository) -> "ScheduleView":
        return ScheduleView.load(repository, self.room_id)
