"""Text layout helpers shared by every pane renderer."""

import time
from typing import List, Optional

ELLIPSIS = "..."


def wrap(text: str, width: int) -> List[str]:
    """Greedy word-wrap of ``text`` into lines no wider than ``width``.

    Words are never split; a word longer than ``width`` ends up on a line of
    its own. Whitespace (including newlines) only separates words.
    """
    if width <= 0 or not text:
        return []

    lines: List[str] = []
    line = ""
    for word in text.split():
        if not line:
            line = word
        elif len(line) + 1 + len(word) <= width:
            line = f"{line} {word}"
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines


def wrap_paragraphs(text: str, width: int) -> List[str]:
    """Wrap each paragraph separately, keeping blank lines between them."""
    if width <= 0 or not text:
        return []

    lines: List[str] = []
    for paragraph in text.splitlines():
        if paragraph.strip():
            lines.extend(wrap(paragraph, width))
        elif lines and lines[-1] != "":
            lines.append("")
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def truncate(text: str, max_len: int) -> str:
    """Cut ``text`` to ``max_len`` characters, marking the cut with an ellipsis."""
    if max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    if max_len <= len(ELLIPSIS):
        return text[:max_len]
    return text[: max_len - len(ELLIPSIS)] + ELLIPSIS


def format_num(n: int) -> str:
    """Compact score/count display: 999, 1.2K, 3.4M."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def format_age(created_utc: float, now: Optional[float] = None) -> str:
    """Relative age of a unix timestamp: 45s, 12m, 3h, 2d."""
    if not created_utc:
        return ""
    if now is None:
        now = time.time()
    diff = max(0, int(now - created_utc))
    if diff < 60:
        return f"{diff}s"
    if diff < 3600:
        return f"{diff // 60}m"
    if diff < 86400:
        return f"{diff // 3600}h"
    return f"{diff // 86400}d"


def normalize_source(value: str) -> str:
    """Turn user input like ``/r/golang`` or ``r/golang`` into ``golang``."""
    value = value.strip()
    for prefix in ("/r/", "r/", "/"):
        if value.lower().startswith(prefix):
            value = value[len(prefix):]
            break
    return value.strip().strip("/")
