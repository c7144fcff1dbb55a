from __future__ import annotations

from typing import Any

from notion_calendar.domain.schemas.api import DatabaseAnalysis, DatabaseSummary
from notion_calendar.domain.schemas.config import DEFAULT_IMPORTANT_PROPERTY, NotionConfig
from notion_calendar.services.notion.mapper import IMPORTANT_LABELS, plain_text

IMPORTANT_TYPES = {"select", "checkbox"}
SCHEDULE_MARKERS = ("일정", "schedule")


class SchemaValidationError(ValueError):
    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems


def schema_problems(database: dict[str, Any], config: NotionConfig) -> list[str]:
    properties = database.get("properties") or {}
    problems: list[str] = []

    expected = [(config.date_property, "date"), (config.title_property, "title")]
    for name, kind in expected:
        prop = properties.get(name)
        if prop is None:
            problems.append(f"Property '{name}' not found")
        elif prop.get("type") != kind:
            problems.append(f"Property '{name}' must be of type '{kind}', got '{prop.get('type')}'")

    important = properties.get(config.important_property)
    if important is not None and important.get("type") not in IMPORTANT_TYPES:
        problems.append(
            f"Property '{config.important_property}' must be a select or checkbox, got '{important.get('type')}'"
        )
    return problems


def validate_schema(database: dict[str, Any], config: NotionConfig) -> None:
    problems = schema_problems(database, config)
    if problems:
        raise SchemaValidationError(problems)


def _is_schedule_name(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in SCHEDULE_MARKERS)


def _is_important_name(name: str) -> bool:
    return name in IMPORTANT_LABELS or name.lower() in IMPORTANT_LABELS


def analyze_database(database: dict[str, Any]) -> DatabaseAnalysis:
    properties = database.get("properties") or {}
    date_property = ""
    title_property = ""
    important_property = ""
    schedules: list[str] = []

    for name, prop in properties.items():
        kind = prop.get("type")
        if kind == "date" and not date_property:
            date_property = name
        elif kind == "title" and not title_property:
            title_property = name
        elif kind == "rich_text" and _is_schedule_name(name):
            schedules.append(name)
        if kind in IMPORTANT_TYPES and _is_important_name(name) and not important_property:
            important_property = name

    missing = []
    if not date_property:
        missing.append("No date property found")
    if not title_property:
        missing.append("No title property found")
    if missing:
        raise SchemaValidationError(missing)

    return DatabaseAnalysis(
        date_property=date_property,
        title_property=title_property,
        schedule_properties=sorted(schedules),
        important_property=important_property or DEFAULT_IMPORTANT_PROPERTY,
    )


def summarize_database(database: dict[str, Any]) -> DatabaseSummary:
    return DatabaseSummary(id=database["id"], title=plain_text(database.get("title")) or "Untitled")
