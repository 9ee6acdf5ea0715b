"""The single mutable view state owned by the event loop."""

import enum
from dataclasses import dataclass, field
from typing import Optional

from .comments import CommentsStatus, CommentTree
from .config import Config
from .feed import FeedStore


class Mode(enum.Enum):
    """Mutually exclusive interaction modes."""

    BROWSING = "browsing"
    SEARCHING = "searching"
    SELECTING_SOURCE = "selecting_source"
    VIEWING_DETAIL = "viewing_detail"
    VIEWING_COMMENTS = "viewing_comments"

    @property
    def captures_input(self) -> bool:
        return self in (Mode.SEARCHING, Mode.SELECTING_SOURCE)


@dataclass(frozen=True)
class LoadStatus:
    """Idle, Loading or Error(message) for the posts feed."""

    kind: str = "idle"
    message: str = ""

    @classmethod
    def idle(cls) -> "LoadStatus":
        return cls("idle")

    @classmethod
    def loading(cls) -> "LoadStatus":
        return cls("loading")

    @classmethod
    def error(cls, message: str) -> "LoadStatus":
        return cls("error", message)

    @property
    def is_loading(self) -> bool:
        return self.kind == "loading"

    @property
    def is_error(self) -> bool:
        return self.kind == "error"


@dataclass
class SavedInput:
    """What an input mode restores when cancelled."""

    mode: Mode
    query: str
    selected_index: int


@dataclass
class ViewState:
    current_source: str
    config: Config = field(default_factory=Config)
    mode: Mode = Mode.BROWSING
    load_status: LoadStatus = field(default_factory=LoadStatus.loading)
    feed: FeedStore = field(default_factory=FeedStore)
    comments: CommentTree = field(default_factory=CommentTree)
    input_buffer: str = ""
    saved_input: Optional[SavedInput] = None
    detail_scroll: int = 0
    comments_scroll: int = 0
    list_top: int = 0
    width: int = 120
    height: int = 40
    status_message: str = ""
    tick: int = 0

    @classmethod
    def initial(cls, config: Config, source: Optional[str] = None) -> "ViewState":
        return cls(current_source=source or config.default_source, config=config)

    def resize(self, width: int, height: int) -> None:
        # Degenerate sizes are clamped by the layout code, never rejected.
        self.width = max(0, width)
        self.height = max(0, height)

    @property
    def busy(self) -> bool:
        return self.load_status.is_loading or self.comments.status is CommentsStatus.LOADING
