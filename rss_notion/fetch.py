"""Feed Fetcher: one bounded GET per feed, parsed with feedparser."""
import calendar
from datetime import datetime, timezone
from typing import Optional

import feedparser
import requests

from rss_notion.errors import FetchError
from rss_notion.models import FeedItem

FETCH_TIMEOUT = 10   # seconds
USER_AGENT = "rss-notion/1.0 (RSS to Notion sync)"


def _published(entry) -> Optional[datetime]:
    parsed = entry.get("published_parsed")
    if not parsed:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        return None


def _content(entry) -> str:
    # Atom <content> / RSS <content:encoded>; plain RSS only has <description>.
    for part in entry.get("content") or []:
        value = part.get("value")
        if value:
            return value
    return entry.get("summary", "")


def entry_to_item(entry) -> FeedItem:
    return FeedItem(
        title=entry.get("title", ""),
        link=entry.get("link", ""),
        content=_content(entry),
        published_at=_published(entry),
    )


def fetch_feed(
    url: str,
    timeout: float = FETCH_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> list[FeedItem]:
    """Fetch and parse a feed, returning its items in document order.

    Raises FetchError on timeout, network failure, HTTP error status or a
    document feedparser could not make sense of.
    """
    http = session or requests
    try:
        resp = http.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(url, e) from e

    feed = feedparser.parse(resp.content)
    if feed.bozo and not feed.entries:
        raise FetchError(url, feed.get("bozo_exception", "malformed feed document"))

    return [entry_to_item(entry) for entry in feed.entries]
