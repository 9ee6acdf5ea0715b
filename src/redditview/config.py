"""Read-only application configuration.

The file uses the nested JSON layout shared with the web client::

    {
      "tui": {"default_subreddit": "sysadmin", "posts_per_page": 50,
              "list_height": 10, "max_title_length": 80},
      "api": {"base_url": "https://www.reddit.com", "timeout_seconds": 10}
    }

Missing, unreadable or malformed files yield the defaults, and every option
falls back to its default on its own when absent, mistyped or non-positive.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "REDDITVIEW_CONFIG"
DEFAULT_CONFIG_PATH = "config.json"


@dataclass(frozen=True)
class Config:
    default_source: str = "sysadmin"
    posts_per_page: int = 50
    initial_viewport_height: int = 10
    max_title_display_length: int = 80
    api_base_url: str = "https://www.reddit.com"
    api_timeout_seconds: int = 10


DEFAULTS = Config()


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _non_empty_str(value: Any, default: str) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()


def _read_json(path: str) -> Dict[str, Any]:
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def config_from_dict(data: Dict[str, Any]) -> Config:
    tui = _section(data, "tui")
    api = _section(data, "api")
    return Config(
        default_source=_non_empty_str(tui.get("default_subreddit"), DEFAULTS.default_source),
        posts_per_page=_positive_int(tui.get("posts_per_page"), DEFAULTS.posts_per_page),
        initial_viewport_height=_positive_int(tui.get("list_height"), DEFAULTS.initial_viewport_height),
        max_title_display_length=_positive_int(tui.get("max_title_length"), DEFAULTS.max_title_display_length),
        api_base_url=_non_empty_str(api.get("base_url"), DEFAULTS.api_base_url).rstrip("/"),
        api_timeout_seconds=_positive_int(api.get("timeout_seconds"), DEFAULTS.api_timeout_seconds),
    )


def load_config(path: Optional[str] = None) -> Config:
    """Load configuration from ``path``, ``$REDDITVIEW_CONFIG`` or ``config.json``."""
    config_path = path or os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    config = config_from_dict(_read_json(config_path))
    logger.debug("Loaded config from %s: %s", config_path, config)
    return config
