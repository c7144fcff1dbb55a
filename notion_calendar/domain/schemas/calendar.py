import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CalendarEvent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    date: str
    title: str
    is_important: bool = False
    page_url: str = ""

    @field_validator("date")
    @classmethod
    def _check_calendar_day(cls, value: str) -> str:
        # fromisoformat also takes week dates and compact forms; only YYYY-MM-DD round-trips.
        if dt.date.fromisoformat(value).isoformat() != value:
            raise ValueError("date must be formatted as YYYY-MM-DD")
        return value


class DayCell(BaseModel):
    date: dt.date
    date_string: str
    is_today: bool
    is_current_month: bool
    is_weekend: bool
    events: list[CalendarEvent] = Field(default_factory=list)
