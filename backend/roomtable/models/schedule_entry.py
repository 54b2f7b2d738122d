import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Boolean, Date, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from roomtable.db.base import Base


class ScheduleEntryRecord(Base):
    __tablename__ = "schedule_entries"
    __table_args__ = (
        Index("ix_schedule_entries_room_exception_date", "room_id", "is_exception", "effective_from"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)
    room_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    course_name: Mapped[str] = mapped_column(String(200), nullable=False)
    lecturer: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    start_time: Mapped[str] = mapped_column(String(8), nullable=False)
    end_time: Mapped[str] = mapped_column(String(8), nullable=False)
    weekdays: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    effective_from: Mapped[date | None] = mapped_column(Date, nullable=True)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_exception: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
