from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import httpx

from notion_calendar.config import settings

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class NotionAPIError(Exception):
    def __init__(self, message: str, status_code: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code or "unknown_error"

    def to_details(self) -> dict[str, Any]:
        return {"status": self.status_code, "code": self.code, "message": self.message}


class NotionClient:
    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        notion_version: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = (base_url or settings.NOTION_API_BASE_URL).rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Notion-Version": notion_version or settings.NOTION_API_VERSION,
            "Content-Type": "application/json",
        }
        self.timeout = timeout if timeout is not None else settings.NOTION_TIMEOUT_S
        self._http = http_client

    def retrieve_database(self, database_id: str) -> dict[str, Any]:
        return self._request("GET", f"/v1/databases/{database_id}")

    def retrieve_user_me(self) -> dict[str, Any]:
        return self._request("GET", "/v1/users/me")

    def query_database(
        self,
        database_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        body: dict[str, Any] = {}
        if filter:
            body["filter"] = filter
        if sorts:
            body["sorts"] = sorts
        return list(self._paginate("POST", f"/v1/databases/{database_id}/query", body))

    def search_databases(self, query: str | None = None) -> list[dict[str, Any]]:
        body: dict[str, Any] = {"filter": {"property": "object", "value": "database"}}
        if query:
            body["query"] = query
        return list(self._paginate("POST", "/v1/search", body))

    def create_page(self, database_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        body = {"parent": {"database_id": database_id}, "properties": properties}
        return self._request("POST", "/v1/pages", json=body)

    @contextmanager
    def _session(self) -> Iterator[httpx.Client]:
        if self._http is not None:
            yield self._http
            return
        with httpx.Client(timeout=self.timeout) as client:
            yield client

    def _paginate(self, method: str, path: str, body: dict[str, Any]) -> Iterator[dict[str, Any]]:
        cursor: str | None = None
        with self._session() as http:
            while True:
                payload = dict(body, page_size=PAGE_SIZE)
                if cursor:
                    payload["start_cursor"] = cursor
                response = self._send(http, method, path, payload)
                yield from response.get("results", [])
                cursor = response.get("next_cursor")
                if not response.get("has_more") or not cursor:
                    return

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        with self._session() as http:
            return self._send(http, method, path, json)

    def _send(self, http: httpx.Client, method: str, path: str, json: dict[str, Any] | None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = http.request(method, url, headers=self.headers, json=json, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.error("Notion request %s %s failed: %s", method, path, exc)
            raise NotionAPIError(str(exc) or exc.__class__.__name__, code="network_error") from exc

        if response.is_success:
            try:
                data = response.json()
            except ValueError:
                data = None
            if not isinstance(data, dict):
                logger.warning("Notion %s %s returned a non-object body", method, path)
                raise NotionAPIError(
                    "Notion returned an unreadable response",
                    status_code=response.status_code,
                    code="invalid_response",
                )
            return data

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or response.reason_phrase or "Notion API request failed"
        code = body.get("code")
        logger.warning("Notion %s %s returned %s (%s): %s", method, path, response.status_code, code, message)
        raise NotionAPIError(message, status_code=response.status_code, code=code)
