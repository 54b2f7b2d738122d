from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from roomtable.db.base import Base
from roomtable.db.session import engine
import roomtable.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "schedule_entries": {
        "id",
        "room_id",
        "course_name",
        "lecturer",
        "start_time",
        "end_time",
        "weekdays",
        "effective_from",
        "effective_to",
        "is_exception",
        "enabled",
    },
}

# Flag columns added after the first schedule_entries release: (name, default).
_FLAG_COLUMNS: tuple[tuple[str, bool], ...] = (
    ("is_exception", False),
    ("enabled", True),
)


def _ensure_schedule_flag_columns(bind: Engine) -> None:
    with bind.begin() as connection:
        inspector = inspect(connection)
        if "schedule_entries" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("schedule_entries")}
        for column_name, default in _FLAG_COLUMNS:
            if column_name in column_names:
                continue
            if connection.dialect.name == "postgresql":
                default_sql = "TRUE" if default else "FALSE"
            else:
                default_sql = "1" if default else "0"
            logger.info("Adding missing column schedule_entries.%s", column_name)
            connection.execute(
                text(
                    "ALTER TABLE schedule_entries "
                    f"ADD COLUMN {column_name} BOOLEAN NOT NULL DEFAULT {default_sql}"
                )
            )


def ensure_runtime_schema_compatibility(bind: Engine | None = None) -> None:
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    _ensure_schedule_flag_columns(bind)
