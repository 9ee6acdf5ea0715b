"""Feed store: the loaded posts, the live search filter and the selection."""

import logging
from typing import List, Optional, Sequence

from .models import Post

logger = logging.getLogger(__name__)


def matches(post: Post, query: str) -> bool:
    """Case-insensitive substring match against title or author."""
    query = query.lower()
    if not query:
        return True
    return query in post.title.lower() or query in post.author.lower()


class FeedStore:
    """Holds ``all_posts`` and the ``filtered_posts`` view derived from it.

    ``filtered_posts`` is only ever recomputed from ``all_posts`` and the
    current query, never edited on its own.
    """

    def __init__(self) -> None:
        self.all_posts: List[Post] = []
        self.filtered_posts: List[Post] = []
        self.query = ""
        self.selected_index = 0
        self.loaded = False

    def load(self, posts: Sequence[Post]) -> None:
        """Replace the feed wholesale, keeping the current query."""
        self.all_posts = list(posts)
        self.loaded = True
        self._refilter()
        logger.debug("Feed loaded: %d posts, %d after filter", len(self.all_posts), len(self.filtered_posts))

    def set_query(self, query: str) -> None:
        self.query = query
        self._refilter()

    def _refilter(self) -> None:
        self.filtered_posts = [post for post in self.all_posts if matches(post, self.query)]
        self.selected_index = 0

    def move_selection(self, delta: int) -> bool:
        """Move the selection by ``delta``, clamped. Returns True if it moved."""
        if not self.filtered_posts or delta == 0:
            return False
        target = max(0, min(self.selected_index + delta, len(self.filtered_posts) - 1))
        if target == self.selected_index:
            return False
        self.selected_index = target
        return True

    def select(self, index: int) -> None:
        """Restore a saved selection, clamped into the current view."""
        if not self.filtered_posts:
            self.selected_index = 0
            return
        self.selected_index = max(0, min(index, len(self.filtered_posts) - 1))

    def current_post(self) -> Optional[Post]:
        if not self.filtered_posts:
            return None
        return self.filtered_posts[self.selected_index]

    def __len__(self) -> int:
        return len(self.filtered_posts)
