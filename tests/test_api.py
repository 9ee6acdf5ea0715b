"""Tests for the Reddit data gateway, using an in-memory httpx transport."""

import asyncio

import httpx
import pytest

from redditview.api import (
    MAX_COMMENT_DEPTH,
    MAX_TOP_LEVEL_COMMENTS,
    DecodeFailed,
    RedditAPI,
    build_comment_tree,
    parse_posts,
)
from redditview.config import Config


def listing(*children):
    return {"kind": "Listing", "data": {"children": list(children), "after": None}}


def post_child(post_id, **data):
    payload = {"id": post_id, "title": f"title {post_id}", "author": "alice", "score": 3, "num_comments": 1}
    payload.update(data)
    return {"kind": "t3", "data": payload}


def comment_child(comment_id, replies=""):
    return {"kind": "t1", "data": {"id": comment_id, "author": "bob", "body": f"body {comment_id}", "score": 1, "replies": replies}}


def run_with(handler, call):
    """Run ``call(api)`` against a RedditAPI backed by ``handler``."""
    async def scenario():
        api = RedditAPI.from_config(Config(), transport=httpx.MockTransport(handler))
        try:
            return await call(api)
        finally:
            await api.aclose()

    return asyncio.run(scenario())


def test_fetch_posts():
    """Posts are decoded, unescaped and stickied posts are dropped."""
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=listing(
            post_child("a", title="Tom &amp; Jerry"),
            post_child("b", stickied=True),
            {"kind": "t5", "data": {}},
            post_child("c", selftext="", selftext_html="&lt;p&gt;Hello &lt;b&gt;there&lt;/b&gt;&lt;/p&gt;"),
        ))

    result = run_with(handler, lambda api: api.fetch_posts("golang"))
    assert result.ok
    assert [post.id for post in result.value] == ["a", "c"]
    assert result.value[0].title == "Tom & Jerry"
    assert result.value[1].selftext == "Hello there"
    assert seen[0].url.path == "/r/golang/.json"
    assert seen[0].url.params["limit"] == "50"
    assert seen[0].headers["User-Agent"].startswith("RedditView/")


def test_fetch_posts_http_error():
    result = run_with(lambda request: httpx.Response(503), lambda api: api.fetch_posts("golang"))
    assert not result.ok
    assert "HTTP 503" in result.error


def test_fetch_posts_transport_error():
    def handler(request):
        raise httpx.ConnectError("network down", request=request)

    result = run_with(handler, lambda api: api.fetch_posts("golang"))
    assert not result.ok
    assert "network down" in result.error


def test_fetch_posts_bad_payloads():
    result = run_with(lambda request: httpx.Response(200, text="<html>"), lambda api: api.fetch_posts("golang"))
    assert "Invalid JSON" in result.error
    result = run_with(lambda request: httpx.Response(200, json={"oops": 1}), lambda api: api.fetch_posts("golang"))
    assert "Unexpected listing format" in result.error


def test_fetch_comments():
    seen = []

    def handler(request):
        seen.append(request)
        thread = comment_child("c1", replies=listing(comment_child("c2"), {"kind": "more", "data": {}}))
        return httpx.Response(200, json=[listing(post_child("p1")), listing(thread, comment_child("c3"))])

    result = run_with(handler, lambda api: api.fetch_comments("golang", "p1"))
    assert result.ok
    assert [comment.id for comment in result.value] == ["c1", "c3"]
    assert [reply.id for reply in result.value[0].replies] == ["c2"]
    assert result.value[0].replies[0].depth == 1
    assert seen[0].url.path == "/r/golang/comments/p1/.json"


def test_comment_tree_limits():
    top_level = [comment_child(f"t{i}") for i in range(MAX_TOP_LEVEL_COMMENTS + 3)]
    assert len(build_comment_tree([listing(), listing(*top_level)])) == MAX_TOP_LEVEL_COMMENTS

    nested = comment_child("leaf")
    for depth in range(MAX_COMMENT_DEPTH + 2):
        nested = comment_child(f"n{depth}", replies=listing(nested))
    root = build_comment_tree(listing(nested))[0]
    depths = [node.depth for node in root.walk()]
    assert max(depths) == MAX_COMMENT_DEPTH - 1


def test_comment_tree_accepts_bare_listing_and_short_arrays():
    assert build_comment_tree([listing()]) == []
    assert [c.id for c in build_comment_tree(listing(comment_child("x")))] == ["x"]


def test_parse_posts_rejects_non_list_children():
    with pytest.raises(DecodeFailed):
        parse_posts({"data": {"children": "nope"}})
