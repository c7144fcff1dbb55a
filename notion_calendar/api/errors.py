from __future__ import annotations

import logging
import random
import string
import time
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from notion_calendar.domain.schemas.api import ApiResponse, ErrorBody

logger = logging.getLogger(__name__)

MISSING_PARAMS = "MISSING_PARAMS"
INVALID_DATE = "INVALID_DATE"
INVALID_CONFIG = "INVALID_CONFIG"
INVALID_DATABASE_ID = "INVALID_DATABASE_ID"
CONNECTION_FAILED = "CONNECTION_FAILED"
INVALID_SCHEMA = "INVALID_SCHEMA"
ANALYSIS_FAILED = "ANALYSIS_FAILED"
NOTION_API_ERROR = "NOTION_API_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400, details: Any | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details


def new_request_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def success_body(data: Any) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    elif isinstance(data, list):
        data = [
            item.model_dump(mode="json", by_alias=True) if isinstance(item, BaseModel) else item for item in data
        ]
    return {"success": True, "data": data}


def error_response(code: str, message: str, status_code: int, details: Any | None = None) -> JSONResponse:
    body = ApiResponse[None](success=False, error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.code, exc.message, exc.status_code, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return error_response(MISSING_PARAMS, "Request body is missing or is not a JSON object", 400)
