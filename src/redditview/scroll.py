"""Scroll window arithmetic for the detail and comment panes.

A pane of ``viewport_height`` rows reserves ``margin`` of them for fixed
header lines (title, meta, rules); the remaining rows show a window into the
scrollable content. The maximum offset is::

    max_offset = max(0, total_lines - viewport_height + margin)

with the visible row count floored at one, so a pane too small to hold its
own header still shows a single content row instead of a negative slice.
Everything here is pure; callers keep only the requested offset and let
:func:`scroll_window` clamp it on every use.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Sequence, TypeVar

T = TypeVar("T")

# Fixed header rows inside each scrollable pane.
DETAIL_MARGIN = 3
COMMENTS_MARGIN = 4


@dataclass(frozen=True)
class ScrollDeltas:
    """Rows moved per key press."""

    line: int = 1
    page: int = 10


DETAIL_DELTAS = ScrollDeltas(line=1, page=10)
COMMENTS_DELTAS = ScrollDeltas(line=1, page=5)


class Window(NamedTuple):
    visible: list
    offset: int
    max_offset: int


def content_rows(viewport_height: int, margin: int) -> int:
    """Rows available for scrolled content, never less than one."""
    return max(1, viewport_height - margin)


def max_offset(total_lines: int, viewport_height: int, margin: int) -> int:
    return max(0, total_lines - content_rows(viewport_height, margin))


def clamp_offset(offset: int, total_lines: int, viewport_height: int, margin: int) -> int:
    return max(0, min(offset, max_offset(total_lines, viewport_height, margin)))


def scroll_window(lines: Sequence[T], viewport_height: int, offset: int, margin: int) -> Window:
    """Return the visible slice of ``lines`` together with the clamped offset."""
    total = len(lines)
    top = max_offset(total, viewport_height, margin)
    offset = max(0, min(offset, top))
    end = min(offset + content_rows(viewport_height, margin), total)
    visible: List[T] = list(lines[offset:end])
    return Window(visible, offset, top)


def scroll_by(offset: int, delta: int, total_lines: int, viewport_height: int, margin: int) -> int:
    """Apply ``delta`` to ``offset`` and clamp into ``[0, max_offset]``."""
    return clamp_offset(offset + delta, total_lines, viewport_height, margin)


def scroll_to_end(total_lines: int, viewport_height: int, margin: int) -> int:
    return max_offset(total_lines, viewport_height, margin)


def list_window_start(selected: int, total: int, rows: int, start: int = 0) -> int:
    """First list row to draw so that ``selected`` stays on screen.

    ``start`` is the previous first row; it only moves when the selection
    leaves the window, so the cursor travels inside the visible rows.
    """
    rows = max(1, rows)
    if total <= rows:
        return 0
    if selected < start:
        start = selected
    elif selected >= start + rows:
        start = selected - rows + 1
    return max(0, min(start, total - rows))
