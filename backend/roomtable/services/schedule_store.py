from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roomtable.core.exceptions import RepositoryError
from roomtable.models.schedule_entry import ScheduleEntryRecord
from roomtable.schemas.schedule import UNSCOPED_ROOM_IDS, ScheduleEntry, ScheduleEntryCreate

logger = logging.getLogger(__name__)


class SqlScheduleRepository:
    """Schedule store backed by the ``schedule_entries`` table."""

    def __init__(self, db: Session):
        self.db = db

    def list_entries(self, room_id: str | None = None) -> list[ScheduleEntry]:
        query = select(ScheduleEntryRecord)
        if room_id is not None:
            query = query.where(
                or_(
                    ScheduleEntryRecord.room_id == room_id,
                    ScheduleEntryRecord.room_id.is_(None),
                    ScheduleEntryRecord.room_id.in_(sorted(UNSCOPED_ROOM_IDS)),
                )
            )
        query = query.order_by(ScheduleEntryRecord.created_at, ScheduleEntryRecord.id)
        try:
            records = list(self.db.execute(query).scalars())
        except SQLAlchemyError as exc:
            logger.exception("Failed to load schedule entries for room %s", room_id)
            raise RepositoryError("Failed to load schedule entries", details={"room_id": room_id}) from exc
        entries: list[ScheduleEntry] = []
        for record in records:
            try:
                entries.append(ScheduleEntry.model_validate(record))
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed schedule row %s: %s",
                    record.id,
                    "; ".join(error["msg"] for error in exc.errors()),
                )
        return entries

    def get_entry(self, entry_id: str) -> ScheduleEntry | None:
        try:
            record = self.db.get(ScheduleEntryRecord, entry_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load schedule entry %s", entry_id)
            raise RepositoryError("Failed to load schedule entry", details={"id": entry_id}) from exc
        return None if record is None else ScheduleEntry.model_validate(record)

    def create_entry(self, payload: ScheduleEntryCreate) -> ScheduleEntry:
        record = ScheduleEntryRecord(**payload.model_dump())
        try:
            self.db.add(record)
            self.db.flush()
            # Rows that could not be read back must never be committed.
            created = ScheduleEntry.model_validate(record)
            self.db.commit()
        except ValidationError as exc:
            self.db.rollback()
            logger.warning("Refusing to persist invalid schedule entry for room %s", payload.room_id)
            raise RepositoryError(
                "Schedule entry cannot be stored",
                details={"errors": [error["msg"] for error in exc.errors()]},
            ) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to persist schedule entry for room %s", payload.room_id)
            raise RepositoryError("Failed to persist schedule entry", details={"room_id": payload.room_id}) from exc
        return created

    def delete_entry(self, entry_id: str) -> bool:
        try:
            record = self.db.get(ScheduleEntryRecord, entry_id)
            if record is None:
                return False
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to delete schedule entry %s", entry_id)
            raise RepositoryError("Failed to delete schedule entry", details={"id": entry_id}) from exc
        return True
