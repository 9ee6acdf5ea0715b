"""Shared builders for the test suite."""

from redditview.api import FetchResult
from redditview.config import Config
from redditview.models import Comment, Post
from redditview.router import InputRouter
from redditview.state import ViewState


def make_post(index, **overrides):
    fields = dict(
        id=f"p{index}",
        title=f"Post number {index}",
        author=f"user{index}",
        score=10 * index,
        num_comments=index,
        subreddit="golang",
        permalink=f"/r/golang/comments/p{index}/post_{index}/",
    )
    fields.update(overrides)
    return Post(**fields)


def sample_posts(count=3):
    return [make_post(i) for i in range(1, count + 1)]


def sample_comments():
    """Two threads: c1 -> c2 -> c3, and a lone c4."""
    c3 = Comment(id="c3", author="carol", body="deepest reply", score=1, depth=2)
    c2 = Comment(id="c2", author="bob", body="a reply", score=2, depth=1, replies=[c3])
    c1 = Comment(id="c1", author="alice", body="top comment", score=5, depth=0, replies=[c2])
    c4 = Comment(id="c4", author="dave", body="another thread", score=3, depth=0)
    return [c1, c4]


def loaded_router(posts=None, width=80, height=24, source="golang"):
    """A router whose feed for ``source`` has finished loading."""
    state = ViewState.initial(Config(), source)
    router = InputRouter(state)
    router.start()
    router.resize(width, height)
    router.posts_loaded(source, FetchResult.success(sample_posts() if posts is None else posts))
    return router, state


def type_text(router, text):
    for char in text:
        router.handle_key("space" if char == " " else char, char)
