import pytest

from notion_calendar.domain.schemas.config import NotionConfig
from notion_calendar.services.notion.client import NotionAPIError
from notion_calendar.services.notion.schema import SchemaValidationError
from notion_calendar.services.notion.service import NotionService

CONFIG = NotionConfig(
    database_id="01234567-89ab-cdef-0123-456789abcdef",
    api_key="secret",
    date_property="Date",
    title_property="Name",
    important_property="Important",
)


class _FakeClient:
    def __init__(self, pages=None, database=None, error: Exception | None = None) -> None:
        self.pages = pages or []
        self.database = database or {}
        self.error = error
        self.queries: list[dict] = []

    def query_database(self, database_id, filter=None, sorts=None):
        if self.error:
            raise self.error
        self.queries.append({"database_id": database_id, "filter": filter, "sorts": sorts})
        return self.pages

    def retrieve_database(self, database_id):
        if self.error:
            raise self.error
        return self.database


def test_fetch_events_queries_date_range_once() -> None:
    pages = [
        {
            "id": "p1",
            "url": "https://notion.so/p1",
            "properties": {
                "Date": {"type": "date", "date": {"start": "2024-05-03"}},
                "Name": {"type": "title", "title": [{"plain_text": "Dentist"}]},
                "Important": {"type": "checkbox", "checkbox": True},
            },
        },
        {"id": "p2", "properties": {"Date": {"type": "date", "date": None}}},
    ]
    client = _FakeClient(pages=pages)
    events = NotionService(CONFIG, client=client).fetch_events("2024-05-01", "2024-05-31")

    assert [event.id for event in events] == ["p1"]
    assert events[0].is_important is True
    assert len(client.queries) == 1
    query = client.queries[0]
    assert query["database_id"] == CONFIG.database_id
    assert query["filter"] == {
        "and": [
            {"property": "Date", "date": {"on_or_after": "2024-05-01"}},
            {"property": "Date", "date": {"on_or_before": "2024-05-31"}},
        ]
    }
    assert query["sorts"] == [{"property": "Date", "direction": "ascending"}]


def test_fetch_events_propagates_api_errors() -> None:
    client = _FakeClient(error=NotionAPIError("unauthorized", status_code=401, code="unauthorized"))
    with pytest.raises(NotionAPIError):
        NotionService(CONFIG, client=client).fetch_events("2024-05-01", "2024-05-31")


def test_validate_database_raises_on_schema_mismatch() -> None:
    client = _FakeClient(database={"properties": {"Date": {"type": "date"}}})
    with pytest.raises(SchemaValidationError):
        NotionService(CONFIG, client=client).validate_database()


def test_test_connection_passes_through_success() -> None:
    client = _FakeClient(database={"properties": {}})
    NotionService(CONFIG, client=client).test_connection()
