"""Default HTTP headers for requests to Reddit."""

from typing import Dict, Optional

from . import __version__

DEFAULT_USER_AGENT = f"RedditView/{__version__} (terminal reader)"


def get_default_headers(user_agent: Optional[str] = None) -> Dict[str, str]:
    """Headers sent with every API request."""
    return {
        "User-Agent": user_agent or DEFAULT_USER_AGENT,
        "Accept": "application/json",
    }
