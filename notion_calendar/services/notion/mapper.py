from __future__ import annotations

from datetime import date
from typing import Any

from notion_calendar.domain.schemas.calendar import CalendarEvent
from notion_calendar.domain.schemas.config import NotionConfig

IMPORTANT_LABELS = {"중요", "important"}
UNTITLED = "Untitled"


def plain_text(rich_text: list[dict[str, Any]] | None) -> str:
    return "".join(part.get("plain_text") or "" for part in rich_text or []).strip()


def extract_date(prop: dict[str, Any] | None) -> str | None:
    if not prop or prop.get("type", "date") != "date":
        return None
    start = (prop.get("date") or {}).get("start")
    if not start:
        return None
    day = start[:10]
    try:
        if date.fromisoformat(day).isoformat() != day:
            return None
    except ValueError:
        return None
    return day


def extract_title(properties: dict[str, Any], title_property: str) -> str:
    prop = properties.get(title_property) or {}
    if prop.get("type") == "title" or "title" in prop:
        text = plain_text(prop.get("title"))
        if text:
            return text
    for candidate in properties.values():
        if candidate.get("type") == "title":
            text = plain_text(candidate.get("title"))
            if text:
                return text
    return UNTITLED


def is_important_value(prop: dict[str, Any] | None) -> bool:
    if not prop:
        return False
    kind = prop.get("type")
    if kind == "checkbox" or (kind is None and "checkbox" in prop):
        return prop.get("checkbox") is True
    if kind == "select" or (kind is None and "select" in prop):
        selected = prop.get("select") or {}
        name = (selected.get("name") or "").strip()
        return name in IMPORTANT_LABELS or name.lower() in IMPORTANT_LABELS
    return False


def page_to_calendar_event(page: dict[str, Any], config: NotionConfig) -> CalendarEvent | None:
    properties = page.get("properties") or {}
    day = extract_date(properties.get(config.date_property))
    if day is None:
        return None
    return CalendarEvent(
        id=page["id"],
        date=day,
        title=extract_title(properties, config.title_property),
        is_important=is_important_value(properties.get(config.important_property)),
        page_url=page.get("url") or "",
    )
