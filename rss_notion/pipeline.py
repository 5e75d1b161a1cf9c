"""Sync Pipeline - RSS feeds -> Notion database.

One worker thread per feed, all sharing a single RateGovernor:

  fetch feed (once)
  for each item, in feed order:
    rate token -> URL query   (duplicate?  skip)
    rate token -> create page (Name, URL, Published, paragraph blocks)

Failures stay as small as possible: a bad item is skipped, a feed that
cannot be fetched is abandoned, other workers never notice. Nothing is
cached between runs; the Notion database is the only dedup state.
"""
import threading
from collections.abc import Callable
from typing import Optional

from rss_notion.chunking import chunk_text
from rss_notion.config import Config
from rss_notion.convert import html_to_markdown
from rss_notion.db import NotionClient
from rss_notion.errors import SyncError
from rss_notion.fetch import fetch_feed
from rss_notion.logging_utils import get_logger
from rss_notion.models import ContentBlock, FeedItem, FeedReport, ItemState, Record, SyncTarget
from rss_notion.rate import RateGovernor

logger = get_logger(__name__)

Fetcher = Callable[[str], list[FeedItem]]


# --- Existence Checker -----------------------------------------------------
def check_if_exists(client: NotionClient, target: SyncTarget, url: str) -> bool:
    """True if a page whose URL property equals `url` exactly is already stored."""
    results = client.query_database(
        target.database_id, {"property": "URL", "url": {"equals": url}}
    )
    return len(results) > 0


# --- Record Writer ---------------------------------------------------------
def build_record(item: FeedItem) -> Record:
    markdown = html_to_markdown(item.content)
    return Record(
        name=item.title,
        url=item.link,
        published=item.published_at,
        children=[ContentBlock(text=chunk) for chunk in chunk_text(markdown)],
    )


def write_record(client: NotionClient, target: SyncTarget, item: FeedItem) -> str:
    """Create the Notion page for `item`; returns the new page id."""
    record = build_record(item)
    page = client.create_page(record.to_page_request(target.database_id))
    return page.get("id", "")


# --- Per-item / per-feed workers ---------------------------------------------
def process_item(
    item: FeedItem,
    client: NotionClient,
    target: SyncTarget,
    governor: RateGovernor,
) -> ItemState:
    label = item.title or item.link
    if not item.link:
        logger.warning("[skip] '%s' has no link", label[:80])
        return ItemState.SKIPPED_ERROR

    try:
        governor.acquire()
        if check_if_exists(client, target, item.link):
            logger.info("[skip] Existing item: '%s' (%s)", label[:80], item.link)
            return ItemState.SKIPPED_DUPLICATE

        governor.acquire()
        write_record(client, target, item)
    except SyncError as e:
        logger.error("[error] '%s' (%s): %s", label[:80], item.link, e)
        return ItemState.SKIPPED_ERROR
    except Exception:
        logger.exception("[error] '%s' (%s): unexpected failure", label[:80], item.link)
        return ItemState.SKIPPED_ERROR

    logger.info("[added] '%s'", label[:80])
    return ItemState.WRITTEN


def process_feed(
    feed_url: str,
    client: NotionClient,
    target: SyncTarget,
    governor: RateGovernor,
    fetcher: Fetcher = fetch_feed,
) -> FeedReport:
    report = FeedReport(feed_url=feed_url)
    logger.info("[fetch] %s", feed_url)
    try:
        items = fetcher(feed_url)
    except SyncError as e:
        logger.error("[fetch] Error fetching feed %s: %s", feed_url, e)
        report.fetch_failed = True
        return report

    report.fetched = len(items)
    logger.info("[fetch] %d item(s) in %s", len(items), feed_url)
    for item in items:
        report.count(process_item(item, client, target, governor))
    return report


# --- Orchestrator ------------------------------------------------------------
def run_sync(
    config: Config,
    client: Optional[NotionClient] = None,
    fetcher: Fetcher = fetch_feed,
    governor: Optional[RateGovernor] = None,
) -> list[FeedReport]:
    """Run one sync pass: a thread per feed, joined before returning."""
    target = config.target
    client = client or NotionClient(target.api_key)
    governor = governor or RateGovernor()

    reports: list[Optional[FeedReport]] = [None] * len(config.feeds)

    def _worker(index: int, url: str) -> None:
        try:
            reports[index] = process_feed(url, client, target, governor, fetcher)
        except Exception:
            logger.exception("[worker] Unexpected failure while syncing %s", url)
            reports[index] = FeedReport(feed_url=url, fetch_failed=True)

    threads = [
        threading.Thread(target=_worker, args=(i, url), name=f"feed-{i}:{url}")
        for i, url in enumerate(config.feeds)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    done = [r for r in reports if r is not None]
    logger.info(
        "[summary] feeds=%d failed_feeds=%d fetched=%d added=%d existing=%d errors=%d",
        len(done),
        sum(r.fetch_failed for r in done),
        sum(r.fetched for r in done),
        sum(r.written for r in done),
        sum(r.duplicates for r in done),
        sum(r.errors for r in done),
    )
    return done
