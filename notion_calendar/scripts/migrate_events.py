"""Migrate a legacy calendar database to the one-page-per-event layout.

Legacy databases hold one page per date with several schedule text
properties (``일정1``, ``일정2`` ...). Each schedule becomes its own page in
the target database; pages without schedules become a single event named
after the page title. Source pages are never modified or deleted.

Environment:
  NOTION_API_KEY       integration token (required)
  SOURCE_DATABASE_ID   legacy database (required)
  TARGET_DATABASE_ID   destination database (defaults to the source)
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
import logging
import sys
import time
from typing import Any, Callable

from notion_calendar.core.env import get_optional_env, get_required_env, load_env
from notion_calendar.logging import configure_logging
from notion_calendar.services.notion.client import NotionAPIError, NotionClient
from notion_calendar.services.notion.mapper import IMPORTANT_LABELS, is_important_value, plain_text

logger = logging.getLogger(__name__)

UNTITLED = "제목 없음"
IMPORTANT_SELECT_NAME = "중요"
SCHEDULE_MARKERS = ("일정", "schedule")


@dataclass
class LegacyPage:
    id: str
    date: str
    title: str
    schedules: list[str] = field(default_factory=list)
    is_important: bool = False


@dataclass
class PlannedEvent:
    date: str
    title: str
    is_important: bool


@dataclass
class MigrationStats:
    total_pages: int = 0
    migrated_events: int = 0
    skipped_pages: int = 0
    errors: int = 0

    def summary_lines(self, dry_run: bool) -> list[str]:
        verb = "Events to create" if dry_run else "Events created"
        return [
            f"  - Total pages: {self.total_pages}",
            f"  - {verb}: {self.migrated_events}",
            f"  - Skipped pages: {self.skipped_pages}",
            f"  - Errors: {self.errors}",
        ]


def _is_important_name(name: str) -> bool:
    return name in IMPORTANT_LABELS or name.lower() in IMPORTANT_LABELS


def parse_legacy_page(page: dict[str, Any]) -> LegacyPage | None:
    properties = page.get("properties") or {}

    page_date = ""
    for prop in properties.values():
        start = (prop.get("date") or {}).get("start") if prop.get("type", "date") == "date" else None
        if start:
            page_date = start
            break
    if not page_date:
        return None

    title = ""
    for prop in properties.values():
        if prop.get("type") == "title" or "title" in prop:
            title = plain_text(prop.get("title"))
            break

    schedules = []
    for name, prop in properties.items():
        if not any(marker in name.lower() for marker in SCHEDULE_MARKERS):
            continue
        text = plain_text(prop.get("rich_text"))
        if text:
            schedules.append(text)

    important = False
    for name, prop in properties.items():
        if _is_important_name(name):
            important = is_important_value(prop)
            break

    return LegacyPage(id=page["id"], date=page_date, title=title, schedules=schedules, is_important=important)


def fetch_legacy_pages(client: NotionClient, database_id: str) -> tuple[list[LegacyPage], int]:
    """Return the legacy pages that carry a date and the count of those that don't."""
    pages = []
    skipped = 0
    for raw in client.query_database(database_id):
        if "properties" not in raw:
            skipped += 1
            continue
        parsed = parse_legacy_page(raw)
        if parsed is None:
            skipped += 1
            continue
        pages.append(parsed)
    return pages, skipped


def plan_events(pages: list[LegacyPage]) -> list[PlannedEvent]:
    planned = []
    for page in pages:
        titles = page.schedules or [page.title or UNTITLED]
        for title in titles:
            planned.append(PlannedEvent(date=page.date, title=title, is_important=page.is_important))
    return planned


def discover_target_properties(database: dict[str, Any]) -> tuple[str, str, str]:
    date_prop = ""
    title_prop = ""
    important_prop = ""
    for name, prop in (database.get("properties") or {}).items():
        kind = prop.get("type")
        if kind == "date" and not date_prop:
            date_prop = name
        if kind == "title" and not title_prop:
            title_prop = name
        if kind == "select" and _is_important_name(name):
            important_prop = name
    return date_prop, title_prop, important_prop


def build_page_properties(
    target: tuple[str, str, str],
    event_date: str,
    title: str,
    is_important: bool,
) -> dict[str, Any]:
    date_prop, title_prop, important_prop = target
    properties: dict[str, Any] = {
        title_prop: {"title": [{"text": {"content": title}}]},
        date_prop: {"date": {"start": event_date}},
    }
    if important_prop and is_important:
        properties[important_prop] = {"select": {"name": IMPORTANT_SELECT_NAME}}
    return properties


def create_event(
    client: NotionClient,
    database_id: str,
    event_date: str,
    title: str,
    is_important: bool,
    target: tuple[str, str, str] | None = None,
) -> bool:
    try:
        if target is None:
            target = discover_target_properties(client.retrieve_database(database_id))
        if not target[0] or not target[1]:
            logger.error("Target database %s has no date/title property", database_id)
            return False
        client.create_page(database_id, build_page_properties(target, event_date, title, is_important))
        return True
    except NotionAPIError as exc:
        logger.error("Failed to create event %r on %s: %s", title, event_date, exc)
        return False


def migrate(
    client: NotionClient,
    source_id: str,
    target_id: str,
    dry_run: bool = False,
    delay_ms: int = 300,
    sleep: Callable[[float], None] = time.sleep,
) -> MigrationStats:
    stats = MigrationStats()
    pages, skipped = fetch_legacy_pages(client, source_id)
    stats.total_pages = len(pages)
    stats.skipped_pages = skipped
    if not pages:
        print("No pages to migrate.")
        return stats

    planned = plan_events(pages)
    print("Migration plan:")
    print(f"  - Pages: {len(pages)}")
    print(f"  - Events: {len(planned)}")
    print(f"  - Target: {'same database' if target_id == source_id else 'new database'}")

    if dry_run:
        for event in planned:
            print(f"  [DRY RUN] {event.date} {event.title}")
        stats.migrated_events = len(planned)
        return stats

    try:
        target = discover_target_properties(client.retrieve_database(target_id))
    except NotionAPIError as exc:
        logger.error("Could not read target database %s: %s", target_id, exc)
        stats.errors = len(planned)
        return stats

    for index, event in enumerate(planned):
        if index and delay_ms > 0:
            sleep(delay_ms / 1000)
        if create_event(client, target_id, event.date, event.title, event.is_important, target=target):
            stats.migrated_events += 1
            print(f"  created {event.date} {event.title}")
        else:
            stats.errors += 1
    return stats


def confirm(question: str, input_fn: Callable[[str], str] = input) -> bool:
    answer = input_fn(f"{question} (y/n): ").strip().lower()
    return answer in {"y", "yes"}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Migrate legacy Notion calendar pages to one page per event.")
    parser.add_argument("--dry-run", action="store_true", help="Only print the migration plan")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--delay-ms", type=int, default=300, help="Pause between page creations")
    args = parser.parse_args(argv)

    load_env()
    configure_logging()
    try:
        api_key = get_required_env("NOTION_API_KEY")
        source_id = get_required_env("SOURCE_DATABASE_ID")
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    target_id = get_optional_env("TARGET_DATABASE_ID", source_id)

    client = NotionClient(api_key=api_key)
    try:
        preview = migrate(client, source_id, target_id, dry_run=True)
        print("\nDry run:")
        print("\n".join(preview.summary_lines(dry_run=True)))
        if args.dry_run or preview.total_pages == 0:
            return 0
        if not args.yes and not confirm("Run the migration now?"):
            print("Migration cancelled.")
            return 0

        stats = migrate(client, source_id, target_id, delay_ms=args.delay_ms)
    except NotionAPIError as exc:
        logger.error("Migration failed: %s", exc)
        return 1

    print("\nMigration finished:")
    print("\n".join(stats.summary_lines(dry_run=False)))
    if stats.errors:
        print("Some events failed; check the log output.")
    print("Legacy pages were left untouched; delete them manually once verified.")
    return 1 if stats.errors else 0


if __name__ == "__main__":
    sys.exit(main())
