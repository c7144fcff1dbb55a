from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Any | None = None


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    data: T | None = None
    error: ErrorBody | None = None


class SetupResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    config_id: str
    embed_url: str


class DatabaseSummary(BaseModel):
    id: str
    title: str


class DatabaseAnalysis(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date_property: str
    title_property: str
    schedule_properties: list[str] = Field(default_factory=list)
    important_property: str
