from __future__ import annotations

import logging

from notion_calendar.domain.schemas.calendar import CalendarEvent
from notion_calendar.domain.schemas.config import NotionConfig
from notion_calendar.services.notion.client import NotionClient
from notion_calendar.services.notion.mapper import page_to_calendar_event
from notion_calendar.services.notion.schema import validate_schema

logger = logging.getLogger(__name__)


class NotionService:
    def __init__(self, config: NotionConfig, client: NotionClient | None = None) -> None:
        self.config = config
        self.client = client or NotionClient(api_key=config.api_key)

    def fetch_events(self, start_date: str, end_date: str) -> list[CalendarEvent]:
        date_prop = self.config.date_property
        pages = self.client.query_database(
            self.config.database_id,
            filter={
                "and": [
                    {"property": date_prop, "date": {"on_or_after": start_date}},
                    {"property": date_prop, "date": {"on_or_before": end_date}},
                ]
            },
            sorts=[{"property": date_prop, "direction": "ascending"}],
        )
        events = []
        skipped = 0
        for page in pages:
            event = page_to_calendar_event(page, self.config)
            if event is None:
                skipped += 1
                continue
            events.append(event)
        logger.debug(
            "Mapped %s events from %s pages (skipped=%s) for database=%s",
            len(events),
            len(pages),
            skipped,
            self.config.database_id,
        )
        return events

    def test_connection(self) -> None:
        self.client.retrieve_database(self.config.database_id)

    def validate_database(self) -> None:
        database = self.client.retrieve_database(self.config.database_id)
        validate_schema(database, self.config)
