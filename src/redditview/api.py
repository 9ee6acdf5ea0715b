"""Reddit data gateway: fetches posts and comments over httpx.

Each public ``fetch_*`` coroutine returns exactly one :class:`FetchResult`.
Transport and decode problems are raised internally as :class:`FetchFailed`
and :class:`DecodeFailed` and turned into failed results here, so callers in
the UI loop never see an exception.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Protocol, TypeVar

import httpx

from .config import Config
from .http_headers import get_default_headers
from .models import Comment, Post


T = TypeVar("T")

MAX_TOP_LEVEL_COMMENTS = 5
MAX_COMMENT_DEPTH = 4


class FetchFailed(Exception):
    """Network or HTTP-level failure."""


class DecodeFailed(Exception):
    """The response was not the JSON shape we expect."""


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(error=error)


class DataGateway(Protocol):
    """What the UI needs from a data source."""

    async def fetch_posts(self, source: str) -> FetchResult[List[Post]]:
        ...

    async def fetch_comments(self, source: str, post_id: str) -> FetchResult[List[Comment]]:
        ...


def parse_posts(payload: Any) -> List[Post]:
    """Decode a subreddit listing into posts, skipping stickied ones."""
    try:
        children = payload["data"]["children"]
    except (KeyError, TypeError) as exc:
        raise DecodeFailed(f"Unexpected listing format: missing {exc}") from exc
    if not isinstance(children, list):
        raise DecodeFailed("Unexpected listing format: children is not a list")

    posts = []
    for item in children:
        if not isinstance(item, dict) or item.get("kind") != "t3":
            continue
        data = item.get("data")
        if not isinstance(data, dict):
            continue
        post = Post.from_api(data)
        if post.stickied:
            continue
        posts.append(post)
    return posts


def _listing_children(listing: Any) -> List[Any]:
    if not isinstance(listing, dict):
        return []
    data = listing.get("data")
    if not isinstance(data, dict):
        return []
    children = data.get("children")
    return children if isinstance(children, list) else []


def build_comment_tree(payload: Any) -> List[Comment]:
    """Build the comment tree from a comments response.

    Reddit answers ``[post_listing, comment_listing]``; a bare comment listing
    is accepted too. Only the first few top-level comments are kept and
    replies stop at ``MAX_COMMENT_DEPTH`` levels.
    """
    if isinstance(payload, list):
        if len(payload) < 2:
            return []
        listing = payload[1]
    elif isinstance(payload, dict):
        listing = payload
    else:
        raise DecodeFailed("Unexpected comments format")

    def process_replies(children: List[Any], depth: int) -> List[Comment]:
        result = []
        for item in children:
            if not isinstance(item, dict) or item.get("kind") != "t1":
                continue  # "more" stubs and anything else
            data = item.get("data")
            if not isinstance(data, dict):
                continue
            created = data.get("created_utc")
            comment = Comment(
                id=str(data.get("id") or ""),
                author=str(data.get("author") or "[deleted]"),
                body=str(data.get("body") or ""),
                score=data.get("score") if isinstance(data.get("score"), int) else 0,
                depth=depth,
                created_utc=float(created) if isinstance(created, (int, float)) else 0.0,
            )
            if depth + 1 < MAX_COMMENT_DEPTH:
                comment.replies = process_replies(_listing_children(data.get("replies")), depth + 1)
            result.append(comment)
        return result

    return process_replies(_listing_children(listing), 0)[:MAX_TOP_LEVEL_COMMENTS]


class RedditAPI:
    """A simple async client for the Reddit JSON API."""

    def __init__(
        self,
        base_url: str = "https://www.reddit.com",
        timeout: float = 10.0,
        limit: int = 50,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.limit = limit
        self.headers = get_default_headers(user_agent)
        self.logger = logging.getLogger(__name__)
        self.async_client = httpx.AsyncClient(
            headers=self.headers,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "RedditAPI":
        return cls(
            base_url=config.api_base_url,
            timeout=float(config.api_timeout_seconds),
            limit=config.posts_per_page,
            **kwargs,
        )

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        self.logger.debug("Requesting url=%s params=%s", url, params)
        try:
            response = await self.async_client.get(url, params=params)
            self.logger.debug("Response status: %s", response.status_code)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchFailed(f"HTTP {exc.response.status_code} from {url}") from exc
        except httpx.HTTPError as exc:
            raise FetchFailed(f"{type(exc).__name__}: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeFailed(f"Invalid JSON from {url}") from exc

    async def get_subreddit_posts_async(self, subreddit: str) -> Any:
        """Fetch the raw listing for a subreddit."""
        url = f"{self.base_url}/r/{subreddit}/.json"
        return await self._get_json(url, params={"limit": self.limit})

    async def get_comments_async(self, subreddit: str, post_id: str) -> Any:
        """Fetch the raw comments response for a post."""
        url = f"{self.base_url}/r/{subreddit}/comments/{post_id}/.json"
        return await self._get_json(url)

    async def fetch_posts(self, source: str) -> FetchResult[List[Post]]:
        try:
            posts = parse_posts(await self.get_subreddit_posts_async(source))
        except (FetchFailed, DecodeFailed) as exc:
            self.logger.error("Loading r/%s failed: %s", source, exc)
            return FetchResult.failure(str(exc))
        return FetchResult.success(posts)

    async def fetch_comments(self, source: str, post_id: str) -> FetchResult[List[Comment]]:
        try:
            comments = build_comment_tree(await self.get_comments_async(source, post_id))
        except (FetchFailed, DecodeFailed) as exc:
            self.logger.error("Loading comments for %s failed: %s", post_id, exc)
            return FetchResult.failure(str(exc))
        return FetchResult.success(comments)

    async def aclose(self) -> None:
        """Close the async HTTP client."""
        await self.async_client.aclose()
