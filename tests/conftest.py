"""
Shared fixtures: sample feed documents, an in-memory Notion stand-in and a
fast rate governor. Nothing here touches the network.
"""
import threading

import pytest

from rss_notion.config import Config
from rss_notion.errors import QueryError, WriteError
from rss_notion.models import FeedItem
from rss_notion.rate import RateGovernor

SAMPLE_RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example Blog</title>
    <link>https://example.com/</link>
    <description>Posts</description>
    <item>
      <title>First post</title>
      <link>https://example.com/first</link>
      <pubDate>Mon, 06 Jan 2025 10:00:00 GMT</pubDate>
      <description>Short summary</description>
      <content:encoded><![CDATA[<p>Hello <strong>world</strong></p>]]></content:encoded>
    </item>
    <item>
      <title>Second post</title>
      <link>https://example.com/second</link>
      <description><![CDATA[<p>Only a description</p>]]></description>
    </item>
  </channel>
</rss>
"""

SAMPLE_ATOM = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <id>urn:example:feed</id>
  <updated>2025-02-01T12:00:00Z</updated>
  <entry>
    <title>Atom entry</title>
    <link href="https://example.org/atom-entry"/>
    <id>urn:example:entry:1</id>
    <published>2025-02-01T12:00:00Z</published>
    <updated>2025-02-01T12:00:00Z</updated>
    <content type="html">&lt;h2&gt;Heading&lt;/h2&gt;&lt;p&gt;Body&lt;/p&gt;</content>
  </entry>
</feed>
"""


class FakeNotionClient:
    """In-memory Notion database keyed on the URL property."""

    def __init__(self, existing_urls=(), fail_query_for=(), fail_create_for=()):
        self._lock = threading.Lock()
        self.pages: list[dict] = [
            {"id": f"seed-{i}", "properties": {"URL": {"url": url}}}
            for i, url in enumerate(existing_urls)
        ]
        self.queries: list[tuple[str, dict]] = []
        self.created: list[dict] = []
        self.fail_query_for = set(fail_query_for)
        self.fail_create_for = set(fail_create_for)

    def query_database(self, database_id, filter, page_size=1):
        url = filter["url"]["equals"]
        with self._lock:
            self.queries.append((database_id, filter))
            if url in self.fail_query_for:
                raise QueryError(f"query on database {database_id} failed: 502")
            return [p for p in self.pages if p["properties"]["URL"]["url"] == url][:page_size]

    def create_page(self, payload):
        url = payload["properties"]["URL"]["url"]
        with self._lock:
            if url in self.fail_create_for:
                raise WriteError("page create failed: 400 validation_error: bad property")
            page = dict(payload, id=f"page-{len(self.pages)}")
            self.pages.append(page)
            self.created.append(page)
            return page

    def created_urls(self) -> list[str]:
        return [p["properties"]["URL"]["url"] for p in self.created]


@pytest.fixture
def notion():
    return FakeNotionClient()


@pytest.fixture
def fast_governor():
    return RateGovernor(rate=1000, per=1.0)


@pytest.fixture
def config():
    return Config(
        feeds=["http://a/rss", "http://b/rss"],
        notion_db_id="8a994146f3da4f922f993c16d95f",
        notion_api_key="secret_test_key",
    )


@pytest.fixture
def make_item():
    def _make(link, title=None, content="<p>body</p>", published_at=None):
        return FeedItem(
            title=title if title is not None else link.rsplit("/", 1)[-1],
            link=link,
            content=content,
            published_at=published_at,
        )
    return _make
