from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from notion_calendar.api.events import ServiceFactory, get_service_factory
from notion_calendar.core.templates import templates
from notion_calendar.core.themes import THEME_PRESETS
from notion_calendar.core.token import InvalidConfigToken, decode_config_token
from notion_calendar.domain.schemas.config import DEFAULT_IMPORTANT_PROPERTY, default_theme
from notion_calendar.services.calendar.grid import (
    attach_events,
    generate_calendar_days,
    get_month_name,
    grid_end,
    get_weekday_names,
    group_events_by_date,
    month_date_range,
    shift_month,
    weeks,
)
from notion_calendar.services.notion.client import NotionAPIError

logger = logging.getLogger(__name__)

router = APIRouter()


def _resolve_month(year: str | None, month: str | None, today: date) -> tuple[int, int]:
    # Anything that cannot be drawn as a full grid falls back to the current month.
    try:
        resolved = int(year or ""), int(month or "")
        grid_end(*resolved)
    except ValueError:
        return today.year, today.month
    return resolved


@router.get("/", include_in_schema=False)
def index() -> RedirectResponse:
    return RedirectResponse(url="/onboarding")


@router.get("/u/{token}", response_class=HTMLResponse)
def widget_page(
    request: Request,
    token: str,
    year: str | None = None,
    month: str | None = None,
    service_factory: ServiceFactory = Depends(get_service_factory),
):
    try:
        notion_config, theme = decode_config_token(token)
    except InvalidConfigToken as exc:
        logger.warning("Widget requested with invalid token: %s", exc)
        return templates.TemplateResponse(
            request,
            "error.html",
            {"title": "Invalid widget link", "message": str(exc)},
            status_code=400,
        )

    today = date.today()
    year, month = _resolve_month(year, month, today)
    days = generate_calendar_days(year, month, today=today)
    start_date, end_date = month_date_range(year, month)

    error_message = None
    try:
        events = service_factory(notion_config).fetch_events(start_date, end_date)
        attach_events(days, group_events_by_date(events))
    except NotionAPIError as exc:
        logger.error("Widget fetch failed for database=%s: %s", notion_config.database_id, exc)
        error_message = "일정을 불러올 수 없습니다."

    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return templates.TemplateResponse(
        request,
        "widget.html",
        {
            "token": token,
            "year": year,
            "month": month,
            "month_name": get_month_name(month),
            "weekday_labels": get_weekday_names(short=True),
            "weeks": weeks(days),
            "theme": theme,
            "error_message": error_message,
            "prev": {"year": prev_year, "month": prev_month},
            "next": {"year": next_year, "month": next_month},
        },
    )


@router.get("/onboarding", response_class=HTMLResponse)
def onboarding_page(request: Request):
    return templates.TemplateResponse(
        request,
        "onboarding.html",
        {
            "presets": THEME_PRESETS,
            "theme": default_theme(),
            "important_property": DEFAULT_IMPORTANT_PROPERTY,
        },
    )
