"""Notion REST client: the two calls the sync needs.

Uses the public API directly with requests, one shared Session per run.
"""
from typing import Optional

import requests

from rss_notion.errors import QueryError, WriteError

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
REQUEST_TIMEOUT = 30   # seconds, per Notion call


def notion_headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Notion-Version": NOTION_VERSION,
        "Content-Type": "application/json",
    }


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"{resp.status_code} {resp.text[:200]}"
    if not isinstance(body, dict):
        return f"{resp.status_code} {str(body)[:200]}"
    return f"{resp.status_code} {body.get('code', '')}: {body.get('message', '')}"


def _json_object(resp: requests.Response) -> dict:
    """Decode a 2xx body; raises ValueError unless it is a JSON object."""
    body = resp.json()
    if not isinstance(body, dict):
        raise ValueError(f"expected a JSON object, got {type(body).__name__}")
    return body


class NotionClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = NOTION_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(notion_headers(api_key))

    def query_database(self, database_id: str, filter: dict, page_size: int = 1) -> list[dict]:
        """Return the first page of results matching `filter`."""
        url = f"{self.base_url}/databases/{database_id}/query"
        try:
            resp = self.session.post(
                url, json={"filter": filter, "page_size": page_size}, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise QueryError(f"query on database {database_id} failed: {e}") from e
        if not resp.ok:
            raise QueryError(f"query on database {database_id} failed: {_error_detail(resp)}")
        try:
            results = _json_object(resp).get("results", [])
        except ValueError as e:
            raise QueryError(f"query on database {database_id} returned a bad body: {e}") from e
        if not isinstance(results, list):
            raise QueryError(f"query on database {database_id} returned a bad body: results is not a list")
        return results

    def create_page(self, payload: dict) -> dict:
        url = f"{self.base_url}/pages"
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise WriteError(f"page create failed: {e}") from e
        if not resp.ok:
            raise WriteError(f"page create failed: {_error_detail(resp)}")
        try:
            return _json_object(resp)
        except ValueError as e:
            raise WriteError(f"page create returned a bad body: {e}") from e
