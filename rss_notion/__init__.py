"""RSS -> Notion sync.

Fetches every configured feed concurrently and adds each new item to a
Notion database as a page (Name, URL, Published, Markdown paragraphs),
deduplicating on the item link.
"""
