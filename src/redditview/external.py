"""Hand-off to the desktop: opening links and copying them to the clipboard."""

import base64
import logging
import shutil
import subprocess
import sys
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

CLIPBOARD_COMMANDS = [
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["pbcopy"],
]


def _opener_commands(url: str) -> List[List[str]]:
    if sys.platform == "darwin":
        return [["open", url]]
    if sys.platform.startswith("win"):
        return [["cmd", "/c", "start", "", url]]
    return [["xdg-open", url], ["sensible-browser", url]]


# Opener processes still running; finished ones are reaped on the next open.
_openers: List[subprocess.Popen] = []


def reap_openers() -> int:
    """Wait on finished opener processes; returns how many are still running."""
    _openers[:] = [process for process in _openers if process.poll() is None]
    return len(_openers)


def open_url(url: str) -> Optional[str]:
    """Open ``url`` in the default browser; returns the opener used, if any."""
    if not url:
        return None
    reap_openers()
    for command in _opener_commands(url):
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except (FileNotFoundError, PermissionError):
            continue
        _openers.append(process)
        logger.debug("Opened %s with %s", url, command[0])
        return command[0]
    return None


def _copy_external(text: str) -> bool:
    """Copy text to clipboard using external utilities if available."""
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]):
            subprocess.run(command, input=text, text=True, check=False)
            return True
    return False


def _copy_osc52(text: str) -> bool:
    """Copy to clipboard via OSC 52 terminal escape sequence."""
    try:
        data = base64.b64encode(text.encode("utf-8")).decode("ascii")
        sys.stdout.write(f"\x1b]52;c;{data}\x07")
        sys.stdout.flush()
    except (OSError, ValueError) as exc:
        logger.debug("OSC 52 copy failed: %s", exc)
        return False
    return True


def copy_text_to_clipboard(text: str, app: Any = None) -> bool:
    """Try the app clipboard, external tools, then OSC 52."""
    if app is not None:
        copy_fn = getattr(app, "copy_to_clipboard", None)
        if callable(copy_fn):
            copy_fn(text)
            return True
    if _copy_external(text):
        return True
    return _copy_osc52(text)
