from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import APIRouter, Body, Depends, Query

from notion_calendar.api.cors import preflight_response
from notion_calendar.api.errors import (
    INTERNAL_ERROR,
    INVALID_CONFIG,
    INVALID_DATE,
    MISSING_PARAMS,
    NOTION_API_ERROR,
    ApiError,
    new_request_id,
    success_body,
)
from notion_calendar.core.token import InvalidConfigToken, config_from_payload, decode_config_token
from notion_calendar.domain.schemas.config import NotionConfig
from notion_calendar.services.calendar.grid import parse_date
from notion_calendar.services.notion.client import NotionAPIError
from notion_calendar.services.notion.service import NotionService
from notion_calendar.utils.timing import Timer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

ServiceFactory = Callable[[NotionConfig], NotionService]


def get_service_factory() -> ServiceFactory:
    return NotionService


def _check_range(start_date: str, end_date: str) -> None:
    try:
        start = parse_date(start_date)
        end = parse_date(end_date)
    except ValueError as exc:
        raise ApiError(INVALID_DATE, f"Dates must be valid YYYY-MM-DD values: {exc}") from exc
    if start > end:
        raise ApiError(INVALID_DATE, "startDate must not be after endDate")


def load_events(
    request_id: str,
    notion_config: NotionConfig,
    start_date: str,
    end_date: str,
    service_factory: ServiceFactory,
) -> dict[str, Any]:
    _check_range(start_date, end_date)
    logger.info(
        "%s fetching events database=%s date_prop=%s range=%s..%s",
        request_id,
        notion_config.database_id,
        notion_config.date_property,
        start_date,
        end_date,
    )
    try:
        with Timer() as timer:
            events = service_factory(notion_config).fetch_events(start_date, end_date)
    except NotionAPIError as exc:
        logger.error("%s Notion API error for database=%s: %s", request_id, notion_config.database_id, exc)
        raise ApiError(NOTION_API_ERROR, exc.message, 500, exc.to_details()) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("%s unexpected error while fetching events", request_id)
        raise ApiError(INTERNAL_ERROR, str(exc) or "An unexpected error occurred", 500) from exc

    logger.info("%s returned %s events in %s", request_id, len(events), timer)
    return success_body(events)


@router.post("/events")
def post_events(
    payload: dict[str, Any] | None = Body(default=None),
    service_factory: ServiceFactory = Depends(get_service_factory),
) -> dict[str, Any]:
    request_id = new_request_id()
    payload = payload or {}
    config = payload.get("config")
    start_date = payload.get("startDate")
    end_date = payload.get("endDate")
    logger.info(
        "%s POST /api/events has_config=%s start=%s end=%s",
        request_id,
        bool(config),
        start_date,
        end_date,
    )
    if not config or not start_date or not end_date:
        raise ApiError(MISSING_PARAMS, "Config, startDate, and endDate are required")
    if not isinstance(config, dict) or not isinstance(start_date, str) or not isinstance(end_date, str):
        raise ApiError(MISSING_PARAMS, "Config must be an object and dates must be strings")

    try:
        notion_config, _ = config_from_payload(config)
    except InvalidConfigToken as exc:
        raise ApiError(INVALID_CONFIG, str(exc)) from exc
    return load_events(request_id, notion_config, start_date, end_date, service_factory)


@router.get("/events/{config_id}")
def get_events(
    config_id: str,
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    service_factory: ServiceFactory = Depends(get_service_factory),
) -> dict[str, Any]:
    request_id = new_request_id()
    logger.info("%s GET /api/events/<token> start=%s end=%s", request_id, start_date, end_date)
    if not start_date or not end_date:
        raise ApiError(MISSING_PARAMS, "startDate and endDate are required")
    try:
        notion_config, _ = decode_config_token(config_id)
    except InvalidConfigToken as exc:
        raise ApiError(INVALID_CONFIG, str(exc)) from exc
    return load_events(request_id, notion_config, start_date, end_date, service_factory)


@router.options("/events")
def options_events():
    return preflight_response()
