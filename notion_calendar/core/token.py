"""Configuration tokens carried in the widget URL.

The token is the URL-safe Base64 form (no ``=`` padding) of a compact JSON
object holding the Notion connection and the theme. Nothing is stored on the
server, so the token is the only copy of a widget's settings.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import ValidationError

from notion_calendar.domain.schemas.config import NotionConfig, ThemeConfig

_CONNECTION_KEYS = {
    "token": "api_key",
    "dbId": "database_id",
    "dateProp": "date_property",
    "titleProp": "title_property",
    "scheduleProps": "schedule_properties",
    "importantProp": "important_property",
}
_THEME_KEYS = {
    "primaryColor": "primary_color",
    "accentColor": "accent_color",
    "importantColor": "important_color",
    "backgroundColor": "background_color",
    "backgroundOpacity": "background_opacity",
    "fontFamily": "font_family",
}
_REQUIRED_KEYS = ("token", "dbId", "dateProp", "titleProp")


class InvalidConfigToken(ValueError):
    pass


def build_token_payload(notion_config: NotionConfig, theme: ThemeConfig | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key, attr in _CONNECTION_KEYS.items():
        payload[key] = getattr(notion_config, attr)
    if theme is not None:
        for key, attr in _THEME_KEYS.items():
            payload[key] = getattr(theme, attr)
    return {key: value for key, value in payload.items() if value is not None}


def urlsafe_b64encode_nopad(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def urlsafe_b64decode_nopad(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def encode_config_token(notion_config: NotionConfig, theme: ThemeConfig | None = None) -> str:
    payload = build_token_payload(notion_config, theme)
    raw = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return urlsafe_b64encode_nopad(raw)


def decode_token_payload(token: str) -> dict[str, Any]:
    cleaned = (token or "").strip()
    if not cleaned:
        raise InvalidConfigToken("Empty configuration token")
    try:
        raw = urlsafe_b64decode_nopad(cleaned)
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidConfigToken(f"Malformed configuration token: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidConfigToken("Configuration token must encode a JSON object")
    return payload


def decode_config_token(token: str) -> tuple[NotionConfig, ThemeConfig]:
    return config_from_payload(decode_token_payload(token))


def config_from_payload(payload: dict[str, Any]) -> tuple[NotionConfig, ThemeConfig]:
    missing = [key for key in _REQUIRED_KEYS if not payload.get(key)]
    if missing:
        raise InvalidConfigToken(f"Configuration is missing: {', '.join(missing)}")

    connection = {attr: payload[key] for key, attr in _CONNECTION_KEYS.items() if payload.get(key) is not None}
    theme_fields = {attr: payload[key] for key, attr in _THEME_KEYS.items() if payload.get(key) is not None}
    try:
        notion_config = NotionConfig(**connection)
        theme = ThemeConfig(**theme_fields).with_defaults()
    except ValidationError as exc:
        raise InvalidConfigToken(f"Invalid configuration: {exc.error_count()} invalid field(s)") from exc
    return notion_config, theme


def build_embed_url(token: str, base_url: str = "") -> str:
    return f"{base_url.rstrip('/')}/u/{token}"
