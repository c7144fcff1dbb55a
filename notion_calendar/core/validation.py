from __future__ import annotations

import re
from typing import Any

from notion_calendar.domain.schemas.config import DEFAULT_IMPORTANT_PROPERTY, NotionConfig

_DATABASE_ID_RE = re.compile(
    r"^(?:[0-9a-fA-F]{32}|[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})$"
)
_EMBEDDED_ID_RE = re.compile(r"([0-9a-fA-F]{32}|[0-9a-fA-F]{8}(?:-[0-9a-fA-F]{4}){3}-[0-9a-fA-F]{12})")

_REQUIRED_FIELDS = {
    "databaseId": "database_id",
    "apiKey": "api_key",
    "dateProperty": "date_property",
    "titleProperty": "title_property",
}


class ConfigValidationError(ValueError):
    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_notion_config(body: Any) -> NotionConfig:
    if not isinstance(body, dict):
        raise ConfigValidationError("Request body must be a JSON object")

    missing = [key for key in _REQUIRED_FIELDS if not _clean(body.get(key))]
    if missing:
        raise ConfigValidationError(f"Missing required fields: {', '.join(missing)}", missing)

    schedule_raw = body.get("scheduleProperties")
    if schedule_raw is not None and not isinstance(schedule_raw, list):
        raise ConfigValidationError("scheduleProperties must be a list", ["scheduleProperties"])
    schedules = [_clean(item) for item in schedule_raw or [] if _clean(item)]

    return NotionConfig(
        database_id=normalize_database_id(_clean(body["databaseId"])),
        api_key=_clean(body["apiKey"]),
        date_property=_clean(body["dateProperty"]),
        title_property=_clean(body["titleProperty"]),
        schedule_properties=schedules or None,
        important_property=_clean(body.get("importantProperty")) or DEFAULT_IMPORTANT_PROPERTY,
    )


def validate_database_id(value: str) -> bool:
    return bool(_DATABASE_ID_RE.match((value or "").strip()))


def normalize_database_id(value: str) -> str:
    """Pull the database id out of a pasted Notion URL and dash it.

    Values that contain no recognizable id are returned unchanged so that
    :func:`validate_database_id` can reject them.
    """
    cleaned = (value or "").strip()
    candidate = cleaned.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    match = _EMBEDDED_ID_RE.search(candidate)
    if not match:
        return cleaned
    compact = match.group(1).replace("-", "").lower()
    return f"{compact[:8]}-{compact[8:12]}-{compact[12:16]}-{compact[16:20]}-{compact[20:]}"
