from notion_calendar.core.token import decode_config_token
from notion_calendar.tests.fakes import DATABASE_ID, FakeNotionService, api_error, schema_error


def _setup_body(**overrides) -> dict:
    body = {
        "databaseId": "0123456789abcdef0123456789abcdef",
        "apiKey": "secret_abc",
        "dateProperty": "날짜",
        "titleProperty": "제목",
        "scheduleProperties": ["일정1", ""],
        "importantProperty": "중요",
        "theme": {"primaryColor": "#B5E3F0", "importantColor": "#FFB8CC", "backgroundColor": "#FFFCF9", "backgroundOpacity": 90},
    }
    body.update(overrides)
    return body


def test_setup_returns_token_and_embed_url(client) -> None:
    response = client.post("/api/setup", json=_setup_body())

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["embedUrl"].endswith(f"/u/{data['configId']}")

    config, theme = decode_config_token(data["configId"])
    assert config.database_id == DATABASE_ID
    assert config.api_key == "secret_abc"
    assert config.schedule_properties == ["일정1"]
    assert theme.primary_color == "#B5E3F0"
    assert theme.background_opacity == 90

    service = FakeNotionService.instances[0]
    assert service.calls == [("test_connection",), ("validate_database",)]


def test_setup_defaults_theme_when_absent(client) -> None:
    body = _setup_body()
    del body["theme"]
    response = client.post("/api/setup", json=body)

    assert response.status_code == 200
    _, theme = decode_config_token(response.json()["data"]["configId"])
    assert theme.primary_color == "#4A5568"
    assert theme.important_color == "#ED64A6"


def test_setup_rejects_missing_fields(client) -> None:
    response = client.post("/api/setup", json=_setup_body(apiKey=""))
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_CONFIG"
    assert error["details"] == {"fields": ["apiKey"]}
    assert FakeNotionService.instances == []


def test_setup_rejects_invalid_theme(client) -> None:
    response = client.post("/api/setup", json=_setup_body(theme={"backgroundOpacity": 250}))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CONFIG"


def test_setup_rejects_bad_database_id(client) -> None:
    response = client.post("/api/setup", json=_setup_body(databaseId="not-a-database"))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_DATABASE_ID"
    assert FakeNotionService.instances == []


def test_setup_stops_when_connection_fails(client, notion_behavior) -> None:
    notion_behavior["test_connection_error"] = api_error("API token is invalid.")
    response = client.post("/api/setup", json=_setup_body())

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "CONNECTION_FAILED"
    assert error["details"] == "API token is invalid."
    assert FakeNotionService.instances[0].calls == [("test_connection",)]


def test_setup_reports_schema_problems(client, notion_behavior) -> None:
    notion_behavior["validate_database_error"] = schema_error()
    response = client.post("/api/setup", json=_setup_body())

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_SCHEMA"
    assert "'날짜' not found" in error["details"]


def test_setup_maps_unexpected_errors(client, notion_behavior) -> None:
    notion_behavior["test_connection_error"] = RuntimeError("kaboom")
    response = client.post("/api/setup", json=_setup_body())
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"


def test_setup_rejects_non_object_body(client) -> None:
    for body in (["nope"], "nope", 42):
        response = client.post("/api/setup", json=body)
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_CONFIG"
        assert error["message"] == "Request body must be a JSON object"
    assert FakeNotionService.instances == []


def test_list_databases(client, client_behavior) -> None:
    client_behavior["databases"] = [
        {"id": "db1", "title": [{"plain_text": "Calendar"}]},
        {"id": "db2", "title": []},
    ]
    response = client.post("/api/databases", json={"apiKey": "secret_abc"})
    assert response.status_code == 200
    assert response.json()["data"] == [{"id": "db1", "title": "Calendar"}, {"id": "db2", "title": "Untitled"}]


def test_list_databases_requires_key(client) -> None:
    response = client.post("/api/databases", json={})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_PARAMS"


def test_list_databases_reports_connection_failure(client, client_behavior) -> None:
    client_behavior["error"] = api_error()
    response = client.post("/api/databases", json={"apiKey": "bad"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CONNECTION_FAILED"


def test_analyze_database(client, client_behavior) -> None:
    client_behavior["database"] = {
        "properties": {
            "이름": {"type": "title"},
            "날짜": {"type": "date"},
            "일정1": {"type": "rich_text"},
            "중요": {"type": "select"},
        }
    }
    response = client.post(
        "/api/analyze-database",
        json={"apiKey": "secret_abc", "databaseId": "0123456789abcdef0123456789abcdef"},
    )
    assert response.status_code == 200
    assert response.json()["data"] == {
        "dateProperty": "날짜",
        "titleProperty": "이름",
        "scheduleProperties": ["일정1"],
        "importantProperty": "중요",
    }
    assert client_behavior["retrieved"] == [DATABASE_ID]


def test_analyze_database_failures(client, client_behavior) -> None:
    client_behavior["database"] = {"properties": {"이름": {"type": "title"}}}
    response = client.post("/api/analyze-database", json={"apiKey": "k", "databaseId": DATABASE_ID})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ANALYSIS_FAILED"

    response = client.post("/api/analyze-database", json={"apiKey": "k"})
    assert response.json()["error"]["code"] == "MISSING_PARAMS"
