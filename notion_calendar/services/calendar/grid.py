"""Month grid helpers for the widget.

Weeks start on Monday and the grid is always six weeks long, so the widget
keeps the same height from month to month.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta

from notion_calendar.domain.schemas.calendar import CalendarEvent, DayCell

GRID_DAYS = 42

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(value: str) -> date:
    parsed = date.fromisoformat(value)
    # Only the zero-padded YYYY-MM-DD form round-trips.
    if format_date(parsed) != value:
        raise ValueError(f"expected YYYY-MM-DD, got {value!r}")
    return parsed


def is_weekend(value: date) -> bool:
    return value.weekday() >= 5


def is_today(value: date, today: date | None = None) -> bool:
    return value == (today or date.today())


def grid_start(year: int, month: int) -> date:
    first = date(year, month, 1)
    return first - timedelta(days=first.weekday())


def grid_end(year: int, month: int) -> date:
    try:
        return grid_start(year, month) + timedelta(days=GRID_DAYS - 1)
    except OverflowError as exc:
        raise ValueError(f"grid for {year}-{month:02d} runs past {date.max}") from exc


def generate_calendar_days(year: int, month: int, today: date | None = None) -> list[DayCell]:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    today = today or date.today()
    grid_end(year, month)
    start = grid_start(year, month)
    days = []
    for offset in range(GRID_DAYS):
        current = start + timedelta(days=offset)
        days.append(
            DayCell(
                date=current,
                date_string=format_date(current),
                is_today=current == today,
                is_current_month=current.month == month and current.year == year,
                is_weekend=is_weekend(current),
            )
        )
    return days


def group_events_by_date(events: Iterable[CalendarEvent]) -> dict[str, list[CalendarEvent]]:
    grouped: dict[str, list[CalendarEvent]] = {}
    for event in events:
        grouped.setdefault(event.date, []).append(event)
    return grouped


def attach_events(days: list[DayCell], grouped: dict[str, list[CalendarEvent]]) -> list[DayCell]:
    for day in days:
        day.events = list(grouped.get(day.date_string, []))
    return days


def weeks(days: list[DayCell]) -> list[list[DayCell]]:
    return [days[i : i + 7] for i in range(0, len(days), 7)]


def get_month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def get_weekday_names(short: bool = False) -> list[str]:
    if short:
        return [name[0] for name in WEEKDAY_NAMES]
    return list(WEEKDAY_NAMES)


def month_date_range(year: int, month: int) -> tuple[str, str]:
    last_day = calendar.monthrange(year, month)[1]
    return format_date(date(year, month, 1)), format_date(date(year, month, last_day))


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def get_relative_time(value: date, today: date | None = None) -> str:
    diff = ((today or date.today()) - value).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Yesterday"
    if diff == -1:
        return "Tomorrow"
    if 0 < diff < 7:
        return f"{diff} days ago"
    if -7 < diff < 0:
        return f"In {abs(diff)} days"
    return format_date(value)
