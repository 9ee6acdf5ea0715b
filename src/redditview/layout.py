"""Pane geometry and screen composition.

``compose`` is a pure function of the view state and the terminal size: it
never writes back into the state, so it can run on every redraw. Scroll
offsets stored in the state are clamped locally while slicing; the router
clamps the stored values with the same helpers when handling keys.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from .comments import CommentLine, CommentsStatus, CommentTree
from .models import Post
from .scroll import COMMENTS_MARGIN, DETAIL_MARGIN, list_window_start, scroll_window
from .state import Mode, ViewState
from .text import format_age, format_num, truncate, wrap, wrap_paragraphs

HEADER_ROWS = 2  # title bar + info bar
FOOTER_ROWS = 1
SEPARATOR_ROWS = 1
MIN_PANE_ROWS = 1
H_PADDING = 1

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


@dataclass(frozen=True)
class Pane:
    top: int
    height: int
    width: int


@dataclass(frozen=True)
class Layout:
    width: int
    height: int
    content_width: int
    list: Pane
    detail: Optional[Pane] = None
    comments: Optional[Pane] = None


class Line(NamedTuple):
    text: str
    style: str


@dataclass(frozen=True)
class Frame:
    """Rendered screen: exactly ``height`` lines, each cut to ``width``."""

    lines: List[Line]

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


def pane_mode(mode: Mode) -> Mode:
    """The navigation mode whose panes are laid out for ``mode``."""
    if mode.captures_input:
        return Mode.BROWSING
    return mode


def compute_panes(mode: Mode, width: int, height: int, list_rows: int = 10) -> Layout:
    """Split the terminal into list/detail/comment panes.

    Every pane keeps at least ``MIN_PANE_ROWS`` rows and the content width is
    at least one column, however small the terminal is; a frame built from a
    too-small layout is simply cut to the real height.
    """
    width = max(0, width)
    height = max(0, height)
    content_width = max(1, width - 2 * H_PADDING)
    body = max(MIN_PANE_ROWS, height - HEADER_ROWS - FOOTER_ROWS)
    top = HEADER_ROWS
    mode = pane_mode(mode)

    if mode is Mode.BROWSING:
        list_height = max(MIN_PANE_ROWS, min(body, max(1, list_rows)))
        return Layout(width, height, content_width, Pane(top, list_height, content_width))

    list_height = max(MIN_PANE_ROWS, (body - SEPARATOR_ROWS) // 2)
    list_pane = Pane(top, list_height, content_width)
    area = max(MIN_PANE_ROWS, body - list_height - SEPARATOR_ROWS)
    detail_top = top + list_height + SEPARATOR_ROWS

    if mode is Mode.VIEWING_DETAIL:
        return Layout(width, height, content_width, list_pane, Pane(detail_top, area, content_width))

    detail_height = max(MIN_PANE_ROWS, (area - SEPARATOR_ROWS) * 2 // 5)
    comments_height = max(MIN_PANE_ROWS, area - SEPARATOR_ROWS - detail_height)
    return Layout(
        width,
        height,
        content_width,
        list_pane,
        Pane(detail_top, detail_height, content_width),
        Pane(detail_top + detail_height + SEPARATOR_ROWS, comments_height, content_width),
    )


def layout_for(state: ViewState) -> Layout:
    return compute_panes(state.mode, state.width, state.height, state.config.initial_viewport_height)


# Scrollable content, shared with the router for clamping.

def detail_lines(post: Optional[Post], width: int) -> List[str]:
    """Scrollable body of the detail pane (everything below its header)."""
    if post is None:
        return []
    lines: List[str] = []
    if len(post.title) > width:
        lines.extend(wrap(post.title, width))
        lines.append("")
    lines.extend(wrap_paragraphs(post.selftext, width))
    if post.external_url:
        if lines:
            lines.append("")
        lines.append("Link: " + truncate(post.external_url, max(1, width - 6)))
    if not lines:
        lines.append("(no text)")
    return lines


def comment_lines(tree: CommentTree, width: int, now: Optional[float] = None, tick: int = 0) -> List[CommentLine]:
    """Scrollable body of the comments pane for whatever state the tree is in."""
    if tree.status is CommentsStatus.LOADING:
        return [CommentLine(f"{spinner(tick)} Loading comments...", "", "muted")]
    if tree.status is CommentsStatus.FAILED:
        return [
            CommentLine(truncate(f"Failed to load comments: {tree.error}", width), "", "error"),
            CommentLine("Press Esc, then c to try again.", "", "muted"),
        ]
    if tree.status is CommentsStatus.NOT_LOADED:
        return [CommentLine("Comments not loaded.", "", "muted")]
    if not tree.roots:
        return [CommentLine("No comments found", "", "muted")]
    return tree.flatten(width, now)


def spinner(tick: int) -> str:
    return SPINNER_FRAMES[tick % len(SPINNER_FRAMES)]


# Pane renderers. Each returns exactly ``pane.height`` lines.

def _fit(lines: List[Line], height: int) -> List[Line]:
    lines = lines[:height]
    return lines + [Line("", "body")] * (height - len(lines))


def render_list(state: ViewState, pane: Pane) -> List[Line]:
    feed = state.feed
    posts = feed.filtered_posts
    if not posts:
        if feed.query:
            return _fit([Line(f"No posts match '{feed.query}'", "muted")], pane.height)
        return _fit([Line("No posts", "muted")], pane.height)

    max_title = max(1, min(state.config.max_title_display_length, pane.width - 7))
    start = list_window_start(feed.selected_index, len(posts), pane.height, state.list_top)
    rows = []
    for index in range(start, min(start + pane.height, len(posts))):
        post = posts[index]
        selected = index == feed.selected_index
        marker = "▶" if selected else " "
        title = truncate(post.title, max_title)
        meta = f"  u/{post.author} • ⬆ {format_num(post.score)} • {format_num(post.num_comments)} comments"
        rows.append(Line(f"{marker}{index + 1:>4}. {title}{meta}", "selected" if selected else "list"))
    return _fit(rows, pane.height)


def render_detail(state: ViewState, pane: Pane, now: Optional[float] = None) -> List[Line]:
    post = state.feed.current_post()
    if post is None:
        return _fit([Line("No post selected", "muted")], pane.height)

    meta = f"u/{post.author}  •  r/{post.subreddit or state.current_source}  •  ⬆ {format_num(post.score)}"
    meta += f"  •  {format_num(post.num_comments)} comments"
    age = format_age(post.created_utc, now)
    if age:
        meta += f"  •  {age} ago"
    header = [
        Line(truncate(post.title, pane.width), "title"),
        Line(truncate(meta, pane.width), "meta"),
        Line("", "body"),
    ][:DETAIL_MARGIN]
    window = scroll_window(detail_lines(post, pane.width), pane.height, state.detail_scroll, DETAIL_MARGIN)
    body = [Line(text, "body") for text in window.visible]
    return _fit(header + body, pane.height)


def render_comments(state: ViewState, pane: Pane, now: Optional[float] = None) -> List[Line]:
    post = state.feed.current_post()
    title = post.title if post else ""
    tree = state.comments
    summary = f"{tree.count()} comments shown" if tree.status is CommentsStatus.LOADED else "Comments"
    header = [
        Line(truncate(f"Comments: {title}", pane.width), "title"),
        Line(truncate(f"{summary}  •  space: collapse/expand  •  +/-", pane.width), "meta"),
        Line("─" * pane.width, "separator"),
        Line("", "body"),
    ][:COMMENTS_MARGIN]
    lines = comment_lines(tree, pane.width, now, state.tick)
    window = scroll_window(lines, pane.height, state.comments_scroll, COMMENTS_MARGIN)
    body = [Line(line.text, line.kind) for line in window.visible]
    return _fit(header + body, pane.height)


def _header(state: ViewState) -> Line:
    text = f" r/{state.current_source}  {len(state.feed)} posts"
    if state.feed.query:
        text += f"  (filter: {state.feed.query})"
    if state.busy:
        text += f"  {spinner(state.tick)}"
    return Line(text, "header")


def _info_bar(state: ViewState) -> Line:
    if state.mode is Mode.SEARCHING:
        return Line(f" Search: {state.input_buffer}█", "prompt")
    if state.mode is Mode.SELECTING_SOURCE:
        return Line(f" Subreddit: {state.input_buffer}█", "prompt")
    if state.load_status.is_error:
        return Line(f" Error: {state.load_status.message}  (F5: retry)", "error")
    if state.status_message:
        return Line(f" {state.status_message}", "status")
    if state.mode in (Mode.VIEWING_DETAIL, Mode.VIEWING_COMMENTS):
        return Line(" ▲/▼ (k/j): scroll  Home/End: jump  Esc/Tab: back  Ctrl+F: search  F5: refresh  q: quit", "info")
    return Line(" ▲/▼ (k/j): navigate  Enter: view  Ctrl+F: search  Ctrl+R: subreddit  F5: refresh  q: quit", "info")


def _footer(state: ViewState) -> Line:
    if state.mode is Mode.VIEWING_COMMENTS:
        return Line(" ↑↓: scroll comments  •  h/l: switch posts  •  w: open URL  •  Esc: close comments  •  q: quit", "footer")
    if state.mode is Mode.VIEWING_DETAIL:
        return Line(" ↑↓: scroll details  •  h/l: switch posts  •  w: open URL  •  Esc/Tab: back to list  •  c: view comments  •  q: quit", "footer")
    if state.mode is Mode.SEARCHING:
        return Line(" Type to filter  •  Enter: keep filter  •  Esc: cancel", "footer")
    if state.mode is Mode.SELECTING_SOURCE:
        return Line(" Enter: load subreddit  •  Esc: cancel", "footer")
    status = "no posts"
    if len(state.feed):
        status = f"{state.feed.selected_index + 1}/{len(state.feed)}"
    return Line(f" Post {status}  •  Enter: view details  •  w: open URL  •  Ctrl+F: search  •  F5: refresh  •  q: quit", "footer")


def _finish(lines: List[Line], width: int, height: int) -> Frame:
    lines = [Line(text[:width], style) for text, style in lines[:height]]
    lines += [Line("", "body")] * (height - len(lines))
    return Frame(lines)


def _pad(lines: List[Line]) -> List[Line]:
    pad = " " * H_PADDING
    return [Line(pad + text if text else text, style) for text, style in lines]


def compose(state: ViewState, width: Optional[int] = None, height: Optional[int] = None, now: Optional[float] = None) -> Frame:
    """Build the full screen for ``state`` at the given terminal size."""
    width = state.width if width is None else max(0, width)
    height = state.height if height is None else max(0, height)

    if not state.feed.loaded:
        if state.load_status.is_error:
            message = [
                Line(f" Error: {state.load_status.message}", "error"),
                Line("", "body"),
                Line(" Press q to quit or F5 to retry", "muted"),
            ]
        else:
            message = [Line(f" {spinner(state.tick)} Loading r/{state.current_source}...", "status")]
        if state.mode.captures_input:
            message.append(_info_bar(state))
        return _finish([Line("", "body")] + message, width, height)

    layout = compute_panes(state.mode, width, height, state.config.initial_viewport_height)
    separator = Line(" " + "─" * layout.content_width, "separator")

    lines = [_header(state), _info_bar(state)]
    lines += _pad(render_list(state, layout.list))
    if layout.detail is not None:
        lines.append(separator)
        lines += _pad(render_detail(state, layout.detail, now))
    if layout.comments is not None:
        lines.append(separator)
        lines += _pad(render_comments(state, layout.comments, now))

    # Body rows not claimed by panes stay blank so the footer sits at the bottom.
    body_end = max(len(lines), height - FOOTER_ROWS)
    lines += [Line("", "body")] * (body_end - len(lines))
    lines.append(_footer(state))
    return _finish(lines, width, height)
