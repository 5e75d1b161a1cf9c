import os
import sys
from typing import Optional

from dotenv import load_dotenv

from rss_notion.config import DEFAULT_CONFIG_PATH, load_config
from rss_notion.errors import ConfigError
from rss_notion.logging_utils import get_logger, refresh_log_level
from rss_notion.pipeline import run_sync

logger = get_logger(__name__)

USAGE = """RSS to Notion Sync Tool

Usage:
  {prog} <command>

Commands:
  run   Execute the RSS to Notion synchronization
  help  Show this help message

Configuration:
  Create a feeds.yaml file (or point RSS_NOTION_CONFIG at one) with the
  following structure:
    feeds:
      - https://example.com/feed.xml
    notion_db_id: your_notion_database_id
    notion_api_key: your_notion_api_key

  NOTION_DB_ID and NOTION_API_KEY in the environment or a .env file
  override the values from the file.
"""


def print_usage(prog: str = "rss-notion") -> None:
    print(USAGE.format(prog=prog))


def run_command() -> int:
    load_dotenv()
    refresh_log_level()
    path = os.environ.get("RSS_NOTION_CONFIG", DEFAULT_CONFIG_PATH)
    try:
        config = load_config(path)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    run_sync(config)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print_usage()
        return 1

    command = argv[0]
    if command == "help":
        print_usage()
        return 0
    if command == "run" and len(argv) == 1:
        return run_command()

    print(f"Unknown command: {' '.join(argv)}")
    print_usage()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
