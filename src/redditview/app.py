#!/usr/bin/env python3
"""Main application file for the RedditView TUI."""

import argparse
import logging
import os
from typing import Iterable, Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.message import Message
from textual.widgets import Static

from .api import DataGateway, FetchResult, RedditAPI
from .config import Config, load_config
from .external import copy_text_to_clipboard, open_url
from .layout import Frame, compose
from .router import CopyText, Effect, FetchComments, FetchPosts, InputRouter, OpenUrl, Quit
from .state import ViewState

logger = logging.getLogger(__name__)

LOG_ENV_VAR = "REDDITVIEW_LOG"
TICK_SECONDS = 0.1

STYLES = {
    "header": "bold #FFFFFF on #FF4500",
    "info": "#90EE90",
    "prompt": "bold #FFD700",
    "status": "#FFD700",
    "error": "bold #FF0000",
    "list": "#FFFFFF",
    "selected": "bold #FFFFFF on #FF6B35",
    "separator": "#FF4500",
    "title": "bold #FF4500",
    "meta": "#FFD700",
    "body": "#CCCCCC",
    "author": "#FFD700",
    "blank": "",
    "muted": "italic #CCCCCC",
    "footer": "#FFFFFF on #333333",
}


def configure_logging(log_file: Optional[str] = None) -> None:
    """Log to ``log_file`` at DEBUG, or silence everything to keep the TUI clean."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if log_file:
        logging.disable(logging.NOTSET)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.DEBUG)
        for name in ("httpcore", "textual"):
            logging.getLogger(name).setLevel(logging.WARNING)
        return

    root_logger.addHandler(logging.NullHandler())
    logging.disable(logging.CRITICAL)


def frame_to_text(frame: Frame) -> Text:
    """Turn a composed frame into a styled rich Text."""
    text = Text(no_wrap=True, overflow="crop")
    for index, line in enumerate(frame.lines):
        if index:
            text.append("\n")
        text.append(line.text, style=STYLES.get(line.style, ""))
    return text


class PostsLoaded(Message):
    """Message sent when a posts fetch finished, successfully or not."""

    def __init__(self, source: str, result: FetchResult):
        self.source = source
        self.result = result
        super().__init__()


class CommentsLoaded(Message):
    """Message sent when a comments fetch finished."""

    def __init__(self, post_id: str, result: FetchResult):
        self.post_id = post_id
        self.result = result
        super().__init__()


class RedditViewApp(App):
    """A Textual app for browsing Reddit feeds."""

    CSS = """
    Screen {
        overflow: hidden;
    }
    #screen {
        width: 100%;
        height: 100%;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "ignore", "Disabled"),
    ]

    def __init__(self, config: Optional[Config] = None, source: Optional[str] = None, gateway: Optional[DataGateway] = None):
        super().__init__()
        self.reddit_config = config or Config()
        self.view_state = ViewState.initial(self.reddit_config, source)
        self.router = InputRouter(self.view_state)
        self.gateway = gateway if gateway is not None else RedditAPI.from_config(self.reddit_config)

    def action_ignore(self) -> None:
        """Ignore a keybinding (used to disable defaults like Ctrl+Q)."""
        return

    def compose(self) -> ComposeResult:
        """Create child widgets for the app."""
        yield Static(id="screen")

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self.router.resize(self.size.width, self.size.height)
        self.set_interval(TICK_SECONDS, self._tick)
        self.run_effects(self.router.start())
        self.redraw()

    async def on_unmount(self) -> None:
        aclose = getattr(self.gateway, "aclose", None)
        if aclose is not None:
            await aclose()

    def redraw(self) -> None:
        state = self.view_state
        frame = compose(state, state.width, state.height)
        self.query_one("#screen", Static).update(frame_to_text(frame))

    def _tick(self) -> None:
        if self.view_state.busy:
            self.router.tick()
            self.redraw()

    def on_resize(self, event: events.Resize) -> None:
        self.router.resize(event.size.width, event.size.height)
        self.redraw()

    def on_key(self, event: events.Key) -> None:
        """Route every key press through the input router."""
        event.stop()
        event.prevent_default()
        self.run_effects(self.router.handle_key(event.key, event.character))
        self.redraw()

    def on_posts_loaded(self, message: PostsLoaded) -> None:
        self.run_effects(self.router.posts_loaded(message.source, message.result))
        self.redraw()

    def on_comments_loaded(self, message: CommentsLoaded) -> None:
        self.run_effects(self.router.comments_loaded(message.post_id, message.result))
        self.redraw()

    # Effects

    def run_effects(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Quit):
                self.exit()
            elif isinstance(effect, FetchPosts):
                self.run_worker(self._load_posts(effect.source), group="posts", exclusive=True, exit_on_error=False)
            elif isinstance(effect, FetchComments):
                self.run_worker(
                    self._load_comments(effect.source, effect.post_id),
                    group="comments",
                    exclusive=True,
                    exit_on_error=False,
                )
            elif isinstance(effect, OpenUrl):
                if open_url(effect.url) is None:
                    self.view_state.status_message = f"Failed to open URL: {effect.url}"
            elif isinstance(effect, CopyText):
                if copy_text_to_clipboard(effect.text, app=self):
                    self.view_state.status_message = "Copied link to clipboard"
                else:
                    self.view_state.status_message = "Clipboard copy not available"

    async def _load_posts(self, source: str) -> None:
        logger.debug("Fetching posts for r/%s", source)
        try:
            result = await self.gateway.fetch_posts(source)
        except Exception as exc:
            logger.exception("Unexpected error fetching r/%s", source)
            result = FetchResult.failure(f"{type(exc).__name__}: {exc}")
        self.post_message(PostsLoaded(source, result))

    async def _load_comments(self, source: str, post_id: str) -> None:
        logger.debug("Fetching comments for %s in r/%s", post_id, source)
        try:
            result = await self.gateway.fetch_comments(source, post_id)
        except Exception as exc:
            logger.exception("Unexpected error fetching comments for %s", post_id)
            result = FetchResult.failure(f"{type(exc).__name__}: {exc}")
        self.post_message(CommentsLoaded(post_id, result))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="redditview", description="Browse Reddit in the terminal.")
    parser.add_argument("subreddit", nargs="?", help="subreddit to open (default from config)")
    parser.add_argument("--config", help="path to config.json (default: $REDDITVIEW_CONFIG or ./config.json)")
    parser.add_argument("--log-file", default=os.getenv(LOG_ENV_VAR), help="write debug logs to this file")
    return parser


def main(argv: Optional[list] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)
    config = load_config(args.config)
    app = RedditViewApp(config=config, source=args.subreddit)
    app.run()


if __name__ == "__main__":
    main()
