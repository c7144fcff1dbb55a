from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from notion_calendar.api import events, pages, setup
from notion_calendar.api.errors import ApiError, api_error_handler, request_validation_handler
from notion_calendar.core.env import load_env
from notion_calendar.logging import configure_logging


def create_app() -> FastAPI:
    load_env()
    configure_logging()

    app = FastAPI(title="Notion Calendar Widget")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(events.router)
    app.include_router(setup.router)
    app.include_router(pages.router)

    @app.get("/ping")
    def ping() -> dict[str, str]:
        return {"message": "pong"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("notion_calendar.main:app", host="0.0.0.0", port=8000, reload=True)
