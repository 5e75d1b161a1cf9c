from unittest.mock import Mock

import pytest
import requests

from rss_notion.db import NOTION_API_URL, NOTION_VERSION, NotionClient
from rss_notion.errors import QueryError, WriteError


def _response(ok=True, status_code=200, body=None):
    resp = Mock(ok=ok, status_code=status_code, text="")
    resp.json.return_value = body if body is not None else {}
    return resp


@pytest.fixture
def session():
    s = Mock()
    s.headers = {}
    return s


def test_sets_auth_and_version_headers(session):
    NotionClient("secret", session=session)
    assert session.headers["Authorization"] == "Bearer secret"
    assert session.headers["Notion-Version"] == NOTION_VERSION


def test_query_database_posts_filter(session):
    session.post.return_value = _response(body={"results": [{"id": "p1"}]})
    client = NotionClient("secret", session=session)

    results = client.query_database("db1", {"property": "URL", "url": {"equals": "https://x.test/a"}})

    assert results == [{"id": "p1"}]
    session.post.assert_called_once_with(
        f"{NOTION_API_URL}/databases/db1/query",
        json={"filter": {"property": "URL", "url": {"equals": "https://x.test/a"}}, "page_size": 1},
        timeout=client.timeout,
    )


def test_query_database_http_error(session):
    session.post.return_value = _response(
        ok=False, status_code=401, body={"code": "unauthorized", "message": "API token is invalid."}
    )
    client = NotionClient("bad", session=session)
    with pytest.raises(QueryError, match="401 unauthorized"):
        client.query_database("db1", {})


def test_query_database_transport_error(session):
    session.post.side_effect = requests.ConnectionError("connection reset")
    client = NotionClient("secret", session=session)
    with pytest.raises(QueryError, match="connection reset"):
        client.query_database("db1", {})


def test_create_page(session):
    session.post.return_value = _response(body={"id": "new-page"})
    client = NotionClient("secret", session=session)
    payload = {"parent": {"database_id": "db1"}, "properties": {}, "children": []}

    assert client.create_page(payload) == {"id": "new-page"}
    session.post.assert_called_once_with(f"{NOTION_API_URL}/pages", json=payload, timeout=client.timeout)


def test_create_page_validation_error(session):
    session.post.return_value = _response(
        ok=False, status_code=400, body={"code": "validation_error", "message": "URL is not a property"}
    )
    client = NotionClient("secret", session=session)
    with pytest.raises(WriteError, match="validation_error"):
        client.create_page({})


def test_create_page_timeout(session):
    session.post.side_effect = requests.Timeout("timed out")
    client = NotionClient("secret", session=session)
    with pytest.raises(WriteError):
        client.create_page({})


def test_query_database_non_json_body(session):
    resp = _response()
    resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    session.post.return_value = resp
    client = NotionClient("secret", session=session)
    with pytest.raises(QueryError, match="bad body"):
        client.query_database("db1", {})


def test_query_database_non_object_body(session):
    session.post.return_value = _response(body=["not", "an", "object"])
    client = NotionClient("secret", session=session)
    with pytest.raises(QueryError, match="bad body"):
        client.query_database("db1", {})


def test_create_page_non_json_body(session):
    resp = _response()
    resp.json.side_effect = ValueError("Expecting value")
    session.post.return_value = resp
    client = NotionClient("secret", session=session)
    with pytest.raises(WriteError, match="bad body"):
        client.create_page({})


def test_error_detail_tolerates_non_object_body(session):
    session.post.return_value = _response(ok=False, status_code=502, body=["gateway"])
    client = NotionClient("secret", session=session)
    with pytest.raises(WriteError, match="502"):
        client.create_page({})
