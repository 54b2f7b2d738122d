import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roomtable.api.deps import get_db
from roomtable.db.base import Base
from roomtable.main import app
from roomtable.schemas.schedule import ScheduleEntry, ScheduleEntryCreate
import roomtable.models  # noqa: F401


class InMemoryScheduleRepository:
    """Repository double that keeps entries in a list and counts writes."""

    def __init__(self, entries=None):
        self.entries = list(entries or [])
        self.created: list[ScheduleEntryCreate] = []

    def list_entries(self, room_id=None):
        return [entry for entry in self.entries if entry.visible_from(room_id)]

    def create_entry(self, payload):
        self.created.append(payload)
        entry = ScheduleEntry(id=f"created-{len(self.created)}", **payload.model_dump())
        self.entries.append(entry)
        return entry

    def delete_entry(self, entry_id):
        before = len(self.entries)
        self.entries = [entry for entry in self.entries if entry.id != entry_id]
        return len(self.entries) != before


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def make_entry():
    """Build a validated entry from wire-style (camelCase) fields."""
    counter = iter(range(1, 100_000))

    def factory(**overrides) -> ScheduleEntry:
        data = {
            "id": f"entry-{next(counter)}",
            "roomId": "A001",
            "courseName": "Physics",
            "lecturer": "Dr. Tran",
            "startTime": "09:00",
            "endTime": "11:00",
            "weekdays": ["MON"],
            "effectiveFrom": "2024-01-01",
            "effectiveTo": "2024-12-31",
        }
        data.update(overrides)
        return ScheduleEntry.model_validate(data)

    return factory


@pytest.fixture()
def make_exception(make_entry):
    def factory(day: str, **overrides) -> ScheduleEntry:
        data = {
            "courseName": "CANCELED",
            "lecturer": "",
            "isException": True,
            "effectiveFrom": day,
            "effectiveTo": day,
        }
        data.update(overrides)
        return make_entry(**data)

    return factory


@pytest.fixture()
def memory_repository():
    return InMemoryScheduleRepository()
