"""Key and load-completion handling for the view state.

The router is the only writer of :class:`~redditview.state.ViewState`. Each
call handles one event, updates the state in place and returns the effects
the event loop has to carry out (at most one fetch per event). Keys are
matched in priority order: input capture (search / subreddit prompt), then
global shortcuts, then navigation for the current mode. Anything unmatched
is ignored.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .api import FetchResult
from .comments import CommentsStatus
from .layout import comment_lines, detail_lines, layout_for
from .scroll import (
    COMMENTS_DELTAS,
    COMMENTS_MARGIN,
    DETAIL_DELTAS,
    DETAIL_MARGIN,
    clamp_offset,
    list_window_start,
    scroll_by,
    scroll_to_end,
    scroll_window,
)
from .state import LoadStatus, Mode, SavedInput, ViewState
from .text import normalize_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Effect:
    pass


@dataclass(frozen=True)
class FetchPosts(Effect):
    source: str


@dataclass(frozen=True)
class FetchComments(Effect):
    source: str
    post_id: str


@dataclass(frozen=True)
class OpenUrl(Effect):
    url: str


@dataclass(frozen=True)
class CopyText(Effect):
    text: str


@dataclass(frozen=True)
class Quit(Effect):
    pass


UP_KEYS = ("up", "k")
DOWN_KEYS = ("down", "j")
PREV_KEYS = ("left", "h")
NEXT_KEYS = ("right", "l")
BACK_KEYS = ("escape", "tab")
EXPAND_KEYS = ("plus", "+")
COLLAPSE_KEYS = ("minus", "-")


class InputRouter:
    """Interprets events against the current mode of ``state``."""

    def __init__(self, state: ViewState):
        self.state = state

    def start(self) -> List[Effect]:
        """Effects to run once at startup: the initial feed load."""
        self.state.load_status = LoadStatus.loading()
        return [FetchPosts(self.state.current_source)]

    # Keys

    def handle_key(self, key: str, character: Optional[str] = None) -> List[Effect]:
        effects = self._route_key(key, character)
        self.follow_selection()
        return effects

    def _route_key(self, key: str, character: Optional[str]) -> List[Effect]:
        if key == "ctrl+c":
            return [Quit()]
        if not self.state.load_status.is_loading:
            self.state.status_message = ""

        mode = self.state.mode
        if mode.captures_input:
            return self._handle_input(key, character)

        effects = self._handle_global(key)
        if effects is not None:
            return effects

        if mode is Mode.BROWSING:
            return self._handle_browsing(key)
        if mode is Mode.VIEWING_DETAIL:
            return self._handle_detail(key)
        if mode is Mode.VIEWING_COMMENTS:
            return self._handle_comments(key)
        return []

    def _handle_input(self, key: str, character: Optional[str]) -> List[Effect]:
        state = self.state
        if key == "escape":
            return self._cancel_input()
        if key == "enter":
            if state.mode is Mode.SEARCHING:
                return self._confirm_search()
            return self._confirm_source()
        if key == "backspace":
            self._edit_buffer(state.input_buffer[:-1])
        elif character and len(character) == 1 and character.isprintable():
            self._edit_buffer(state.input_buffer + character)
        return []

    def _edit_buffer(self, value: str) -> None:
        state = self.state
        state.input_buffer = value
        if state.mode is Mode.SEARCHING:
            before = self._current_post_id()
            state.feed.set_query(value)
            self._after_selection_change(before)

    def _cancel_input(self) -> List[Effect]:
        state = self.state
        saved = state.saved_input
        previous = saved.mode if saved else Mode.BROWSING
        if state.mode is Mode.SEARCHING and saved is not None:
            before = self._current_post_id()
            state.feed.set_query(saved.query)
            state.feed.select(saved.selected_index)
            self._after_selection_change(before)
        self._leave_input(previous)
        if state.feed.current_post() is None and previous in (Mode.VIEWING_DETAIL, Mode.VIEWING_COMMENTS):
            state.mode = Mode.BROWSING
        if state.mode is Mode.VIEWING_COMMENTS:
            return self._ensure_comments()
        return []

    def _confirm_search(self) -> List[Effect]:
        state = self.state
        if state.feed.query != state.input_buffer:
            before = self._current_post_id()
            state.feed.set_query(state.input_buffer)
            self._after_selection_change(before)
        logger.debug("Search confirmed: %r -> %d posts", state.feed.query, len(state.feed))
        self._leave_input(Mode.BROWSING)
        return []

    def _confirm_source(self) -> List[Effect]:
        state = self.state
        source = normalize_source(state.input_buffer)
        if not source:
            return []
        logger.debug("Switching source %s -> %s", state.current_source, source)
        state.current_source = source
        state.load_status = LoadStatus.loading()
        state.status_message = f"Loading r/{source}..."
        state.comments.invalidate()
        state.detail_scroll = 0
        state.comments_scroll = 0
        self._leave_input(Mode.BROWSING)
        return [FetchPosts(source)]

    def _leave_input(self, mode: Mode) -> None:
        self.state.mode = mode
        self.state.input_buffer = ""
        self.state.saved_input = None

    def _enter_input(self, mode: Mode, buffer: str) -> None:
        state = self.state
        state.saved_input = SavedInput(state.mode, state.feed.query, state.feed.selected_index)
        state.input_buffer = buffer
        state.mode = mode

    def _handle_global(self, key: str) -> Optional[List[Effect]]:
        state = self.state
        if key == "q":
            return [Quit()]
        if key == "ctrl+f":
            self._enter_input(Mode.SEARCHING, state.feed.query)
            return []
        if key == "ctrl+r":
            self._enter_input(Mode.SELECTING_SOURCE, state.current_source)
            return []
        if key == "f5":
            state.load_status = LoadStatus.loading()
            state.status_message = f"Refreshing r/{state.current_source}..."
            return [FetchPosts(state.current_source)]
        if key in ("w", "y"):
            post = state.feed.current_post()
            if post is None or not post.link:
                return []
            if key == "w":
                return [OpenUrl(post.link)]
            return [CopyText(post.link)]
        return None

    def _handle_browsing(self, key: str) -> List[Effect]:
        state = self.state
        if key in UP_KEYS or key in PREV_KEYS:
            self._move_selection(-1)
        elif key in DOWN_KEYS or key in NEXT_KEYS:
            self._move_selection(1)
        elif key in ("pageup", "pagedown"):
            rows = layout_for(state).list.height
            self._move_selection(-rows if key == "pageup" else rows)
        elif key == "home":
            self._move_selection(-len(state.feed))
        elif key == "end":
            self._move_selection(len(state.feed))
        elif key == "enter":
            if state.feed.current_post() is not None:
                state.mode = Mode.VIEWING_DETAIL
                state.detail_scroll = 0
        return []

    def _handle_detail(self, key: str) -> List[Effect]:
        state = self.state
        if key in BACK_KEYS:
            state.mode = Mode.BROWSING
            state.detail_scroll = 0
        elif key in PREV_KEYS:
            self._move_selection(-1)
        elif key in NEXT_KEYS:
            self._move_selection(1)
        elif key == "c":
            if state.feed.current_post() is None:
                return []
            state.mode = Mode.VIEWING_COMMENTS
            state.comments_scroll = 0
            return self._ensure_comments()
        else:
            offset = self._scroll(key, state.detail_scroll, self._detail_metrics(), DETAIL_DELTAS.line, DETAIL_DELTAS.page)
            if offset is not None:
                state.detail_scroll = offset
        return []

    def _handle_comments(self, key: str) -> List[Effect]:
        state = self.state
        if key in BACK_KEYS or key == "c":
            state.mode = Mode.VIEWING_DETAIL
            state.comments_scroll = 0
        elif key in PREV_KEYS or key in NEXT_KEYS:
            if self._move_selection(-1 if key in PREV_KEYS else 1):
                return self._ensure_comments()
        elif key == "space":
            self._collapse_top(None)
        elif key in EXPAND_KEYS:
            self._collapse_top(False)
        elif key in COLLAPSE_KEYS:
            self._collapse_top(True)
        else:
            offset = self._scroll(key, state.comments_scroll, self._comments_metrics(), COMMENTS_DELTAS.line, COMMENTS_DELTAS.page)
            if offset is not None:
                state.comments_scroll = offset
        return []

    # Selection and scrolling

    def _current_post_id(self) -> Optional[str]:
        post = self.state.feed.current_post()
        return post.id if post else None

    def _move_selection(self, delta: int) -> bool:
        before = self._current_post_id()
        if not self.state.feed.move_selection(delta):
            return False
        self._after_selection_change(before)
        return True

    def _after_selection_change(self, before: Optional[str]) -> None:
        """Reset per-post view state when the selected post changed."""
        state = self.state
        if self._current_post_id() == before:
            return
        state.detail_scroll = 0
        state.comments_scroll = 0
        state.comments.invalidate()

    def _ensure_comments(self) -> List[Effect]:
        """Request comments for the current post unless already present."""
        state = self.state
        post = state.feed.current_post()
        if post is None or state.comments.is_loaded_for(post.id):
            return []
        state.comments.start_loading(post.id)
        state.comments_scroll = 0
        return [FetchComments(post.subreddit or state.current_source, post.id)]

    def _detail_metrics(self) -> Tuple[int, int, int]:
        pane = layout_for(self.state).detail
        if pane is None:
            return 0, 0, DETAIL_MARGIN
        return len(detail_lines(self.state.feed.current_post(), pane.width)), pane.height, DETAIL_MARGIN

    def _comments_metrics(self) -> Tuple[int, int, int]:
        pane = layout_for(self.state).comments
        if pane is None:
            return 0, 0, COMMENTS_MARGIN
        return len(comment_lines(self.state.comments, pane.width)), pane.height, COMMENTS_MARGIN

    @staticmethod
    def _scroll(key: str, offset: int, metrics: Tuple[int, int, int], line: int, page: int) -> Optional[int]:
        total, height, margin = metrics
        if key in UP_KEYS:
            return scroll_by(offset, -line, total, height, margin)
        if key in DOWN_KEYS:
            return scroll_by(offset, line, total, height, margin)
        if key == "pageup":
            return scroll_by(offset, -page, total, height, margin)
        if key == "pagedown":
            return scroll_by(offset, page, total, height, margin)
        if key == "home":
            return 0
        if key == "end":
            return scroll_to_end(total, height, margin)
        return None

    def _collapse_top(self, collapsed: Optional[bool]) -> None:
        """Toggle (or set) collapse on the comment at the top of the viewport."""
        state = self.state
        if state.comments.status is not CommentsStatus.LOADED:
            return
        pane = layout_for(state).comments
        if pane is None:
            return
        lines = comment_lines(state.comments, pane.width)
        window = scroll_window(lines, pane.height, state.comments_scroll, COMMENTS_MARGIN)
        target = next((line.comment_id for line in window.visible if line.comment_id), None)
        if target is None:
            return
        if collapsed is None:
            state.comments.toggle_collapse(target)
        else:
            state.comments.set_collapsed(target, collapsed)
        self.clamp_scroll()

    def clamp_scroll(self) -> None:
        """Pull stored offsets back into range after content or size changed."""
        state = self.state
        total, height, margin = self._detail_metrics()
        state.detail_scroll = clamp_offset(state.detail_scroll, total, height, margin)
        total, height, margin = self._comments_metrics()
        state.comments_scroll = clamp_offset(state.comments_scroll, total, height, margin)

    def follow_selection(self) -> None:
        """Shift the list window only when the selection has left it."""
        state = self.state
        rows = layout_for(state).list.height
        state.list_top = list_window_start(state.feed.selected_index, len(state.feed), rows, state.list_top)

    # Other events

    def resize(self, width: int, height: int) -> None:
        self.state.resize(width, height)
        self.clamp_scroll()
        self.follow_selection()

    def posts_loaded(self, source: str, result: FetchResult) -> List[Effect]:
        state = self.state
        if source != state.current_source:
            logger.debug("Discarding stale posts for r/%s (current r/%s)", source, state.current_source)
            return []

        state.status_message = ""
        if not result.ok:
            logger.debug("Posts for r/%s failed: %s", source, result.error)
            state.load_status = LoadStatus.error(result.error or "unknown error")
            return []

        state.feed.load(result.value or [])
        state.load_status = LoadStatus.idle()
        state.comments.invalidate()
        state.detail_scroll = 0
        state.list_top = 0
        state.comments_scroll = 0
        if state.mode in (Mode.VIEWING_DETAIL, Mode.VIEWING_COMMENTS):
            state.mode = Mode.BROWSING
        if state.saved_input is not None:
            state.saved_input = SavedInput(Mode.BROWSING, state.saved_input.query, 0)
        return []

    def comments_loaded(self, post_id: str, result: FetchResult) -> List[Effect]:
        tree = self.state.comments
        if tree.post_id != post_id or tree.status is not CommentsStatus.LOADING:
            logger.debug("Discarding stale comments for %s", post_id)
            return []
        if result.ok:
            tree.replace_all(result.value or [])
        else:
            tree.fail(result.error or "unknown error")
        self.state.comments_scroll = 0
        return []

    def tick(self) -> None:
        """Advance the spinner while something is loading."""
        if self.state.busy:
            self.state.tick += 1
