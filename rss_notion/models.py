from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from rss_notion.chunking import BLOCK_LIMIT


class FeedItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    link: str = ""                            # dedup key, compared verbatim
    content: str = ""                         # raw HTML
    published_at: Optional[datetime] = None


class SyncTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_id: str
    api_key: str


class ContentBlock(BaseModel):
    text: str

    def to_notion(self) -> dict:
        return {
            "object": "block",
            "type": "paragraph",
            "paragraph": {
                "rich_text": [{"type": "text", "text": {"content": self.text}}],
            },
        }


class Record(BaseModel):
    """Notion page for one feed item: fixed properties plus paragraph children."""

    name: str
    url: str
    published: Optional[datetime] = None
    children: list[ContentBlock] = []

    def properties(self) -> dict:
        props: dict = {
            "Name": {"title": [{"text": {"content": self.name[:BLOCK_LIMIT]}}]},
            "URL": {"url": self.url},
        }
        if self.published is not None:
            props["Published"] = {"date": {"start": self.published.isoformat()}}
        return props

    def to_page_request(self, database_id: str) -> dict:
        return {
            "parent": {"database_id": database_id},
            "properties": self.properties(),
            "children": [block.to_notion() for block in self.children],
        }


class ItemState(str, Enum):
    WRITTEN = "written"
    SKIPPED_DUPLICATE = "skipped-duplicate"
    SKIPPED_ERROR = "skipped-error"


class FeedReport(BaseModel):
    feed_url: str
    fetched: int = 0
    written: int = 0
    duplicates: int = 0
    errors: int = 0
    fetch_failed: bool = False

    def count(self, state: ItemState) -> None:
        if state is ItemState.WRITTEN:
            self.written += 1
        elif state is ItemState.SKIPPED_DUPLICATE:
            self.duplicates += 1
        else:
            self.errors += 1
