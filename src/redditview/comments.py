"""Comment tree for the post currently shown in the comments panel."""

import enum
from typing import Iterator, List, NamedTuple, Optional, Sequence

from .models import Comment
from .text import format_age, format_num, wrap

INDENT = "  "


class CommentsStatus(enum.Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class CommentLine(NamedTuple):
    """One rendered row of the flattened tree."""

    text: str
    comment_id: str
    kind: str  # "author", "body" or "blank"


class CommentTree:
    """Owns the root comments of one post plus their per-node collapse flags.

    The tree is replaced wholesale on every fetch; ``post_id`` names the post
    the content (or the in-flight request) belongs to.
    """

    def __init__(self) -> None:
        self.roots: List[Comment] = []
        self.post_id: Optional[str] = None
        self.status = CommentsStatus.NOT_LOADED
        self.error = ""

    def invalidate(self) -> None:
        """Drop everything; the next open has to fetch again."""
        self.roots = []
        self.post_id = None
        self.status = CommentsStatus.NOT_LOADED
        self.error = ""

    def start_loading(self, post_id: str) -> None:
        self.roots = []
        self.post_id = post_id
        self.status = CommentsStatus.LOADING
        self.error = ""

    def replace_all(self, roots: Sequence[Comment]) -> None:
        self.roots = list(roots)
        self.status = CommentsStatus.LOADED
        self.error = ""

    def fail(self, message: str) -> None:
        self.roots = []
        self.status = CommentsStatus.FAILED
        self.error = message

    def is_loaded_for(self, post_id: str) -> bool:
        """True when content for ``post_id`` is present or on its way."""
        return self.post_id == post_id and self.status in (CommentsStatus.LOADED, CommentsStatus.LOADING)

    def walk(self) -> Iterator[Comment]:
        for root in self.roots:
            yield from root.walk()

    def find(self, comment_id: str) -> Optional[Comment]:
        for node in self.walk():
            if node.id == comment_id:
                return node
        return None

    def toggle_collapse(self, comment_id: str) -> bool:
        node = self.find(comment_id)
        if node is None:
            return False
        node.collapsed = not node.collapsed
        return True

    def set_collapsed(self, comment_id: str, collapsed: bool) -> bool:
        node = self.find(comment_id)
        if node is None or node.collapsed == collapsed:
            return False
        node.collapsed = collapsed
        return True

    def count(self) -> int:
        return sum(1 for _ in self.walk())

    def flatten(self, width: int, now: Optional[float] = None) -> List[CommentLine]:
        """Render visible nodes depth-first; collapsed nodes hide their replies.

        This is the only place comment line counts come from, so the scroll
        window for the panel must always be computed on its output.
        """
        lines: List[CommentLine] = []
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            indent = INDENT * node.depth
            header = f"{indent}u/{node.author}  •  ⬆ {format_num(node.score)}"
            age = format_age(node.created_utc, now)
            if age:
                header += f"  •  {age}"
            if node.collapsed and node.replies:
                header += f"  [+{node.descendant_count()} hidden]"
            lines.append(CommentLine(header, node.id, "author"))

            body_indent = indent + INDENT
            for row in wrap(node.body, max(1, width - len(body_indent))):
                lines.append(CommentLine(body_indent + row, node.id, "body"))
            lines.append(CommentLine("", node.id, "blank"))

            if not node.collapsed:
                stack.extend(reversed(node.replies))
        return lines
