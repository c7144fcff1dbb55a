from pathlib import Path

from fastapi.templating import Jinja2Templates

from notion_calendar.core.themes import hex_with_opacity

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["with_opacity"] = hex_with_opacity
