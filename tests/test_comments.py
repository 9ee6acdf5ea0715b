"""Tests for the comment tree and its flattening."""

from helpers import sample_comments

from redditview.comments import CommentsStatus, CommentTree
from redditview.models import Comment


def loaded_tree():
    tree = CommentTree()
    tree.start_loading("p1")
    tree.replace_all(sample_comments())
    return tree


def test_flatten_is_preorder_with_separators():
    lines = loaded_tree().flatten(40)
    assert [line.comment_id for line in lines] == ["c1"] * 3 + ["c2"] * 3 + ["c3"] * 3 + ["c4"] * 3
    assert [line.kind for line in lines[:3]] == ["author", "body", "blank"]
    assert lines[0].text == "u/alice  •  ⬆ 5"
    assert lines[1].text == "  top comment"
    assert lines[3].text.startswith("  u/bob")
    assert lines[7].text == "      deepest reply"


def test_collapse_hides_descendants_only():
    tree = loaded_tree()
    assert tree.toggle_collapse("c2")
    ids = [line.comment_id for line in tree.flatten(40)]
    assert "c2" in ids
    assert "c3" not in ids
    assert tree.find("c3").collapsed is False
    header = tree.flatten(40)[3].text
    assert header.endswith("[+1 hidden]")


def test_collapsed_ancestor_wins_over_child_flags():
    tree = loaded_tree()
    tree.toggle_collapse("c1")
    ids = {line.comment_id for line in tree.flatten(40)}
    assert ids == {"c1", "c4"}
    tree.toggle_collapse("c1")
    assert {line.comment_id for line in tree.flatten(40)} == {"c1", "c2", "c3", "c4"}


def test_body_wrap_width_shrinks_with_depth():
    body = "word " * 30
    tree = CommentTree()
    tree.replace_all([Comment(id="x", author="a", body=body, depth=3)])
    body_lines = [line.text for line in tree.flatten(20) if line.kind == "body"]
    assert len(body_lines) > 1
    assert all(len(line) <= 20 for line in body_lines)
    assert all(line.startswith(" " * 8) for line in body_lines)


def test_status_transitions():
    tree = CommentTree()
    assert tree.status is CommentsStatus.NOT_LOADED
    tree.start_loading("p1")
    assert tree.is_loaded_for("p1")
    assert not tree.is_loaded_for("p2")
    tree.fail("boom")
    assert tree.status is CommentsStatus.FAILED
    assert not tree.is_loaded_for("p1")
    tree.invalidate()
    assert tree.post_id is None
    assert tree.roots == []


def test_toggle_unknown_comment():
    tree = loaded_tree()
    assert not tree.toggle_collapse("nope")
    assert not tree.set_collapsed("c4", False)
    assert tree.set_collapsed("c4", True)
    assert tree.count() == 4
