"""RedditView - a terminal browser for Reddit feeds."""

__version__ = "0.2.0"
