import logging
from datetime import date

from roomtable.services.schedule_view import ScheduleView


def test_from_records_skips_malformed_records(caplog):
    records = [
        {"id": "ok", "roomId": "A001", "courseName": "Physics", "startTime": "09:00", "endTime": "11:00", "weekdays": "MON"},
        {"id": "bad-time", "roomId": "A001", "courseName": "Chem", "startTime": "9h", "endTime": "11:00"},
        {"id": "bad-day", "roomId": "A001", "courseName": "Bio", "startTime": "09:00", "endTime": "10:00", "weekdays": "XYZ"},
        {"id": "elsewhere", "roomId": "B002", "courseName": "Math", "startTime": "09:00", "endTime": "10:00"},
    ]
    with caplog.at_level(logging.WARNING, logger="roomtable.services.schedule_view"):
        view = ScheduleView.from_records(records, room_id="A001")

    assert [entry.id for entry in view] == ["ok"]
    assert "bad-time" in caplog.text
    assert "bad-day" in caplog.text


def test_load_and_refresh_read_from_repository(make_entry, memory_repository):
    memory_repository.entries.extend([make_entry(id="a"), make_entry(id="b", roomId="B002")])
    view = ScheduleView.load(memory_repository, "A001")
    assert [entry.id for entry in view] == ["a"]

    memory_repository.entries.append(make_entry(id="c"))
    assert len(view) == 1
    refreshed = view.refresh(memory_repository)
    assert [entry.id for entry in refreshed] == ["a", "c"]
    assert refreshed.room_id == "A001"


def test_with_entry_returns_new_snapshot(make_entry, make_exception):
    view = ScheduleView(room_id="A001", entries=(make_entry(id="a"),))
    exception = make_exception("2024-03-04", id="x")
    merged = view.with_entry(exception)

    assert len(view) == 1
    assert merged.get("x") == exception
    assert view.get("x") is None
    assert merged.exceptions_on(date(2024, 3, 4)) == [exception]
    assert merged.exceptions_on(date(2024, 3, 5)) == []
