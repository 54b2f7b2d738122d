import json
import logging
from datetime import date

import httpx
import pytest

from roomtable.core.config import Settings
from roomtable.core.exceptions import ConfigurationError, RepositoryError
from roomtable.schemas.schedule import ScheduleEntryCreate
from roomtable.services.remote_store import HttpScheduleRepository

BASE_URL = "http://store.test/api"


def _repository(handler) -> HttpScheduleRepository:
    return HttpScheduleRepository(BASE_URL, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_list_entries_filters_room_and_skips_malformed_records():
    records = [
        {"id": "1", "roomId": "A001", "courseName": "Physics", "startTime": "9:0", "endTime": "11:00", "weekdays": ["MON"]},
        {"id": "2", "roomId": "B002", "courseName": "Math", "startTime": "09:00", "endTime": "10:00"},
        {"id": "3", "roomId": "Unknown", "courseName": "Draft", "startTime": "13:00", "endTime": "14:00"},
        {"id": "4", "roomId": "A001", "courseName": "Broken", "startTime": "late", "endTime": "10:00"},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/schedules"
        return httpx.Response(200, json=records)

    entries = _repository(handler).list_entries("A001")
    assert [entry.id for entry in entries] == ["1", "3"]
    assert entries[0].start_time == "09:00:00"


def test_create_entry_posts_to_room_endpoint():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "new-1", "courseName": "Canceled", "isException": None})

    payload = ScheduleEntryCreate(
        room_id="A001",
        course_name="Canceled",
        start_time="09:00",
        end_time="11:00",
        weekdays=["MON"],
        effective_from=date(2024, 3, 11),
        is_exception=True,
    )
    created = _repository(handler).create_entry(payload)

    assert seen["path"] == "/api/rooms/A001/schedules"
    assert "roomId" not in seen["body"]
    assert seen["body"]["courseName"] == "Canceled"
    assert seen["body"]["effectiveFrom"] == "2024-03-11"
    assert seen["body"]["effectiveTo"] == "2024-03-11"
    assert created.id == "new-1"
    assert created.room_id == "A001"
    assert created.is_exception is True


def test_create_entry_rejects_unscoped_payload_without_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    payload = ScheduleEntryCreate(course_name="Physics", start_time="09:00", end_time="10:00")
    with pytest.raises(RepositoryError):
        _repository(handler).create_entry(payload)


def test_http_error_status_becomes_repository_error():
    repository = _repository(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(RepositoryError) as exc_info:
        repository.list_entries()

    assert exc_info.value.details["status_code"] == 500
    assert exc_info.value.details["body"] == "boom"


def test_transport_failure_becomes_repository_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RepositoryError, match="request failed"):
        _repository(handler).list_entries()


@pytest.mark.parametrize("response", [httpx.Response(200, text="not json"), httpx.Response(200, json={"items": []})])
def test_unexpected_list_payload_is_rejected(response):
    with pytest.raises(RepositoryError):
        _repository(lambda request: response).list_entries()


def test_delete_entry_reports_missing_entry():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        return httpx.Response(404 if request.url.path.endswith("/missing") else 200, json={"success": True})

    repository = _repository(handler)
    assert repository.delete_entry("entry-1") is True
    assert repository.delete_entry("missing") is False


def test_from_settings_requires_store_url():
    with pytest.raises(ConfigurationError):
        HttpScheduleRepository.from_settings(Settings(schedule_store_url=None))

    with HttpScheduleRepository.from_settings(Settings(schedule_store_url=f"{BASE_URL}/")) as repository:
        assert repository.base_url == BASE_URL


def test_list_entries_logs_non_object_records(caplog):
    records = [
        "not-a-record",
        {"id": "1", "roomId": "A001", "courseName": "Physics", "startTime": "09:00", "endTime": "10:00"},
        42,
    ]

    with caplog.at_level(logging.WARNING, logger="roomtable.services.remote_store"):
        entries = _repository(lambda request: httpx.Response(200, json=records)).list_entries("A001")

    assert [entry.id for entry in entries] == ["1"]
    assert "position 0" in caplog.text
    assert "position 2" in caplog.text
