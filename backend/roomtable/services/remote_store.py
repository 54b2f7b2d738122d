from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from roomtable.core.config import Settings, get_settings
from roomtable.core.exceptions import ConfigurationError, RepositoryError
from roomtable.schemas.schedule import ScheduleEntry, ScheduleEntryCreate
from roomtable.services.schedule_view import parse_entries

logger = logging.getLogger(__name__)


class HttpScheduleRepository:
    """Schedule store reached over the REST API of the building backend.

    No retries are attempted; every transport or protocol failure is raised
    as RepositoryError and the caller decides what to do with it.
    """

    def __init__(self, base_url: str, *, timeout: float = 10.0, client: httpx.Client | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "HttpScheduleRepository":
        settings = settings or get_settings()
        if not settings.schedule_store_url:
            raise ConfigurationError("schedule_store_url is not configured")
        return cls(settings.schedule_store_url, timeout=settings.schedule_store_timeout_seconds)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpScheduleRepository":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("Schedule store %s %s failed with %s", method, url, exc.response.status_code)
            raise RepositoryError(
                f"Schedule store returned HTTP {exc.response.status_code}",
                details={"status_code": exc.response.status_code, "body": exc.response.text[:500]},
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Schedule store %s %s failed: %s", method, url, exc)
            raise RepositoryError("Schedule store request failed", details={"error": str(exc)}) from exc
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RepositoryError("Schedule store returned an invalid JSON body") from exc

    def list_entries(self, room_id: str | None = None) -> list[ScheduleEntry]:
        payload = self._decode(self._request("GET", "/schedules"))
        if not isinstance(payload, list):
            raise RepositoryError("Schedule store returned an unexpected payload for /schedules")
        records = []
        for position, item in enumerate(payload):
            if isinstance(item, dict):
                records.append(item)
            else:
                logger.warning("Skipping non-object schedule record at position %d: %r", position, item)
        entries = parse_entries(records)
        return [entry for entry in entries if entry.visible_from(room_id)]

    def create_entry(self, payload: ScheduleEntryCreate) -> ScheduleEntry:
        if payload.is_unscoped:
            raise RepositoryError("Schedule entries can only be created for a specific room")

        body = payload.model_dump(mode="json", by_alias=True, exclude={"room_id", "room_name"})
        created = self._decode(
            self._request("POST", f"/rooms/{quote(payload.room_id, safe='')}/schedules", json=body)
        )
        if not isinstance(created, dict):
            raise RepositoryError("Schedule store returned an unexpected payload for a created entry")

        # Fields the store echoes back win; anything it omits comes from the request.
        merged = {**payload.model_dump(mode="json", by_alias=True)}
        merged.update({key: value for key, value in created.items() if value is not None})
        try:
            return ScheduleEntry.model_validate(merged)
        except ValidationError as exc:
            raise RepositoryError(
                "Schedule store returned an invalid entry",
                details={"errors": [error["msg"] for error in exc.errors()]},
            ) from exc

    def delete_entry(self, entry_id: str) -> bool:
        try:
            self._request("DELETE", f"/schedules/{quote(entry_id, safe='')}")
        except RepositoryError as exc:
            if exc.details.get("status_code") == 404:
                return False
            raise
        return True
