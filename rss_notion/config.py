"""Configuration: feeds.yaml plus NOTION_* environment overrides.

    feeds:
      - https://example.com/feed.xml
    notion_db_id: your_notion_database_id
    notion_api_key: your_notion_api_key

NOTION_DB_ID / NOTION_API_KEY (environment or .env) take precedence over
the file so the API key does not have to live next to the feed list.
"""
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from rss_notion.errors import ConfigError
from rss_notion.models import SyncTarget

DEFAULT_CONFIG_PATH = "feeds.yaml"

ENV_OVERRIDES = {
    "notion_db_id": "NOTION_DB_ID",
    "notion_api_key": "NOTION_API_KEY",
}


class Config(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    feeds: list[str]
    notion_db_id: str
    notion_api_key: str

    @field_validator("feeds")
    @classmethod
    def _feeds_present(cls, feeds: list[str]) -> list[str]:
        feeds = [f.strip() for f in feeds]
        if not feeds:
            raise ValueError("no feeds specified")
        if any(not f for f in feeds):
            raise ValueError("feed URLs must not be blank")
        return feeds

    @field_validator("notion_db_id", "notion_api_key")
    @classmethod
    def _required(cls, value: str, info: ValidationInfo) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{info.field_name} is required")
        return value

    @property
    def target(self) -> SyncTarget:
        return SyncTarget(database_id=self.notion_db_id, api_key=self.notion_api_key)


def validate_config(data: Mapping[str, Any]) -> Config:
    try:
        return Config.model_validate(dict(data))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid config: {problems}") from e


def load_config(
    path: str | os.PathLike = DEFAULT_CONFIG_PATH,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Read, merge env overrides into, and validate the YAML config file."""
    env = os.environ if environ is None else environ
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Error loading config {config_path}: {e}") from e

    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing config {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping, got {type(data).__name__}")

    for field, env_name in ENV_OVERRIDES.items():
        if env.get(env_name):
            data[field] = env[env_name]

    return validate_config(data)
