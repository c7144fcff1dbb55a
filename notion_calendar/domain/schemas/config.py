from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_PRIMARY_COLOR = "#4A5568"
DEFAULT_ACCENT_COLOR = "#ED64A6"
DEFAULT_IMPORTANT_COLOR = "#ED64A6"
DEFAULT_BACKGROUND_COLOR = "#FFFFFF"
DEFAULT_BACKGROUND_OPACITY = 100
DEFAULT_FONT_FAMILY = "system-ui, -apple-system, sans-serif"
DEFAULT_IMPORTANT_PROPERTY = "중요"


class NotionConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    database_id: str
    api_key: str
    date_property: str
    title_property: str
    schedule_properties: list[str] | None = None
    important_property: str = DEFAULT_IMPORTANT_PROPERTY


class ThemeConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    primary_color: str | None = None
    accent_color: str | None = None
    important_color: str | None = None
    background_color: str | None = None
    background_opacity: int | None = Field(default=None, ge=0, le=100)
    font_family: str | None = None

    def with_defaults(self) -> "ThemeConfig":
        return ThemeConfig(
            primary_color=self.primary_color or DEFAULT_PRIMARY_COLOR,
            accent_color=self.accent_color or DEFAULT_ACCENT_COLOR,
            important_color=self.important_color or DEFAULT_IMPORTANT_COLOR,
            background_color=self.background_color or DEFAULT_BACKGROUND_COLOR,
            background_opacity=(
                DEFAULT_BACKGROUND_OPACITY if self.background_opacity is None else self.background_opacity
            ),
            font_family=self.font_family or DEFAULT_FONT_FAMILY,
        )


def default_theme() -> ThemeConfig:
    return ThemeConfig().with_defaults()


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class WidgetConfig(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    notion_config: NotionConfig
    theme: ThemeConfig = Field(default_factory=default_theme)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
