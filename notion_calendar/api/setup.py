from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from notion_calendar.api.cors import preflight_response
from notion_calendar.api.errors import (
    ANALYSIS_FAILED,
    CONNECTION_FAILED,
    INTERNAL_ERROR,
    INVALID_CONFIG,
    INVALID_DATABASE_ID,
    INVALID_SCHEMA,
    MISSING_PARAMS,
    ApiError,
    new_request_id,
    success_body,
)
from notion_calendar.api.events import ServiceFactory, get_service_factory
from notion_calendar.config import settings
from notion_calendar.core.token import build_embed_url, encode_config_token
from notion_calendar.core.validation import (
    ConfigValidationError,
    normalize_database_id,
    validate_database_id,
    validate_notion_config,
)
from notion_calendar.domain.schemas.api import SetupResult
from notion_calendar.domain.schemas.config import ThemeConfig, WidgetConfig
from notion_calendar.services.notion.client import NotionAPIError, NotionClient
from notion_calendar.services.notion.schema import SchemaValidationError, analyze_database, summarize_database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_client_factory():
    return NotionClient


def _parse_theme(raw: Any) -> ThemeConfig:
    if raw is None:
        return ThemeConfig().with_defaults()
    try:
        return ThemeConfig.model_validate(raw).with_defaults()
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid theme: {exc.error_count()} invalid field(s)", ["theme"]) from exc


@router.post("/setup")
def post_setup(
    payload: Any = Body(default=None),
    service_factory: ServiceFactory = Depends(get_service_factory),
) -> dict[str, Any]:
    request_id = new_request_id()
    if payload is None:
        payload = {}
    fields = payload if isinstance(payload, dict) else {}
    logger.info(
        "%s POST /api/setup has_database_id=%s has_api_key=%s date_prop=%s title_prop=%s",
        request_id,
        bool(fields.get("databaseId")),
        bool(fields.get("apiKey")),
        fields.get("dateProperty"),
        fields.get("titleProperty"),
    )

    try:
        notion_config = validate_notion_config(payload)
        theme = _parse_theme(fields.get("theme"))
    except ConfigValidationError as exc:
        logger.warning("%s config validation failed: %s", request_id, exc)
        raise ApiError(INVALID_CONFIG, str(exc), details={"fields": exc.fields}) from exc

    if not validate_database_id(notion_config.database_id):
        logger.warning("%s invalid database id: %s", request_id, notion_config.database_id)
        raise ApiError(INVALID_DATABASE_ID, "Invalid Notion database ID format")

    try:
        service = service_factory(notion_config)
        try:
            service.test_connection()
        except NotionAPIError as exc:
            logger.warning("%s connection check failed: %s", request_id, exc)
            raise ApiError(CONNECTION_FAILED, "Failed to connect to Notion API", details=exc.message) from exc

        try:
            service.validate_database()
        except (SchemaValidationError, NotionAPIError) as exc:
            logger.warning("%s schema validation failed: %s", request_id, exc)
            raise ApiError(INVALID_SCHEMA, "Database schema validation failed", details=str(exc)) from exc
    except ApiError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("%s unexpected error during setup", request_id)
        raise ApiError(INTERNAL_ERROR, str(exc) or "An unexpected error occurred", 500) from exc

    widget = WidgetConfig(notion_config=notion_config, theme=theme)
    token = encode_config_token(widget.notion_config, widget.theme)
    embed_url = build_embed_url(token, settings.PUBLIC_BASE_URL)
    logger.info("%s widget %s saved config=%s...", request_id, widget.id, token[:20])
    return success_body(SetupResult(config_id=token, embed_url=embed_url))


@router.post("/databases")
def post_databases(
    payload: dict[str, Any] | None = Body(default=None),
    client_factory=Depends(get_client_factory),
) -> dict[str, Any]:
    request_id = new_request_id()
    api_key = (payload or {}).get("apiKey")
    if not isinstance(api_key, str) or not api_key.strip():
        raise ApiError(MISSING_PARAMS, "apiKey is required")
    try:
        databases = client_factory(api_key=api_key.strip()).search_databases()
    except NotionAPIError as exc:
        logger.warning("%s listing databases failed: %s", request_id, exc)
        raise ApiError(CONNECTION_FAILED, "Failed to connect to Notion API", details=exc.message) from exc
    summaries = [summarize_database(database) for database in databases]
    logger.info("%s found %s shared databases", request_id, len(summaries))
    return success_body(summaries)


@router.post("/analyze-database")
def post_analyze_database(
    payload: dict[str, Any] | None = Body(default=None),
    client_factory=Depends(get_client_factory),
) -> dict[str, Any]:
    request_id = new_request_id()
    payload = payload or {}
    api_key = payload.get("apiKey")
    database_id = payload.get("databaseId")
    if not isinstance(api_key, str) or not api_key.strip() or not isinstance(database_id, str) or not database_id.strip():
        raise ApiError(MISSING_PARAMS, "apiKey and databaseId are required")
    database_id = normalize_database_id(database_id)
    try:
        database = client_factory(api_key=api_key.strip()).retrieve_database(database_id)
        analysis = analyze_database(database)
    except NotionAPIError as exc:
        logger.warning("%s analysis failed for database=%s: %s", request_id, database_id, exc)
        raise ApiError(ANALYSIS_FAILED, "Could not analyze the database", details=exc.message) from exc
    except SchemaValidationError as exc:
        logger.warning("%s analysis failed for database=%s: %s", request_id, database_id, exc)
        raise ApiError(ANALYSIS_FAILED, "Could not analyze the database", details=str(exc)) from exc
    return success_body(analysis)


@router.options("/setup")
def options_setup():
    return preflight_response()
