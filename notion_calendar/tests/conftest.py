import pytest
from fastapi.testclient import TestClient

from notion_calendar.api.events import get_service_factory
from notion_calendar.api.setup import get_client_factory
from notion_calendar.core.token import encode_config_token
from notion_calendar.domain.schemas.config import NotionConfig, ThemeConfig
from notion_calendar.main import create_app
from notion_calendar.tests.fakes import DATABASE_ID, FakeNotionClient, FakeNotionService


@pytest.fixture
def notion_behavior() -> dict:
    FakeNotionService.instances = []
    return {}


@pytest.fixture
def client_behavior() -> dict:
    return {}


@pytest.fixture
def client(notion_behavior, client_behavior):
    app = create_app()
    app.dependency_overrides[get_service_factory] = lambda: (
        lambda config: FakeNotionService(config, notion_behavior)
    )
    app.dependency_overrides[get_client_factory] = lambda: (
        lambda api_key: FakeNotionClient(client_behavior, api_key)
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def notion_config() -> NotionConfig:
    return NotionConfig(
        database_id=DATABASE_ID,
        api_key="secret_abc",
        date_property="날짜",
        title_property="제목",
        important_property="중요",
    )


@pytest.fixture
def config_token(notion_config) -> str:
    return encode_config_token(notion_config, ThemeConfig(primary_color="#123456", background_opacity=80))
