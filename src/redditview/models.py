"""Post and comment records decoded from Reddit listing JSON."""

import html
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List


def _html_to_text(content_html: str) -> str:
    """Best-effort conversion of HTML content to plain text."""
    if not content_html:
        return ""
    text = re.sub(r"<[^>]+>", " ", html.unescape(content_html))
    return html.unescape(" ".join(text.split()))


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def _to_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class Post:
    """A single submission as shown in the feed."""

    id: str
    title: str
    author: str = ""
    score: int = 0
    num_comments: int = 0
    selftext: str = ""
    url: str = ""
    subreddit: str = ""
    permalink: str = ""
    created_utc: float = 0.0
    stickied: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Post":
        selftext = html.unescape(_to_str(data.get("selftext")))
        if not selftext.strip():
            selftext = _html_to_text(_to_str(data.get("selftext_html")))
        created = data.get("created_utc")
        return cls(
            id=_to_str(data.get("id")),
            title=html.unescape(_to_str(data.get("title"))),
            author=_to_str(data.get("author")) or "[deleted]",
            score=_to_int(data.get("score")),
            num_comments=_to_int(data.get("num_comments")),
            selftext=selftext,
            url=_to_str(data.get("url")),
            subreddit=_to_str(data.get("subreddit")),
            permalink=_to_str(data.get("permalink")),
            created_utc=float(created) if isinstance(created, (int, float)) else 0.0,
            stickied=bool(data.get("stickied", False)),
        )

    @property
    def link(self) -> str:
        """Link used for opening/copying: the permalink, else the post URL."""
        if self.permalink:
            if self.permalink.startswith("/"):
                return "https://reddit.com" + self.permalink
            return self.permalink
        return self.url

    @property
    def external_url(self) -> str:
        """The post URL when it points away from reddit itself."""
        if not self.url or "reddit.com" in self.url:
            return ""
        return self.url


@dataclass
class Comment:
    """One node in a comment thread; the parent owns its replies."""

    id: str
    author: str
    body: str
    score: int = 0
    depth: int = 0
    created_utc: float = 0.0
    replies: List["Comment"] = field(default_factory=list)
    collapsed: bool = False

    def walk(self) -> Iterator["Comment"]:
        """Pre-order traversal of this node and every descendant."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.replies))

    def descendant_count(self) -> int:
        return sum(1 for _ in self.walk()) - 1
