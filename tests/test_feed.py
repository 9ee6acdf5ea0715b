"""Tests for the feed store and its live filter."""

from helpers import make_post, sample_posts

from redditview.feed import FeedStore


def scenario_posts():
    return [
        make_post(1, title="Learning Rust", author="alice"),
        make_post(2, title="Weekly thread", author="gopher42"),
        make_post(3, title="Python tips", author="bob"),
    ]


def test_query_matching_author_only():
    """A query that only hits one author leaves exactly that post selected."""
    store = FeedStore()
    store.load(scenario_posts())
    store.move_selection(2)
    store.set_query("go")
    assert len(store.filtered_posts) == 1
    assert store.selected_index == 0
    assert store.current_post().id == "p2"


def test_query_is_case_insensitive():
    store = FeedStore()
    store.load(scenario_posts())
    store.set_query("RUST")
    assert [post.id for post in store.filtered_posts] == ["p1"]


def test_empty_query_shows_everything():
    store = FeedStore()
    posts = scenario_posts()
    store.load(posts)
    store.set_query("")
    assert store.filtered_posts == posts


def test_filtered_posts_are_a_matching_subset():
    store = FeedStore()
    posts = scenario_posts()
    store.load(posts)
    for query in ("o", "t", "zzz", "Thread", "B"):
        store.set_query(query)
        assert all(post in posts for post in store.filtered_posts)
        for post in store.filtered_posts:
            assert query.lower() in post.title.lower() or query.lower() in post.author.lower()


def test_load_keeps_query_and_resets_selection():
    store = FeedStore()
    store.load(sample_posts(5))
    store.set_query("number")
    store.move_selection(3)
    store.load([make_post(7), make_post(8, title="unrelated")])
    assert store.query == "number"
    assert [post.id for post in store.filtered_posts] == ["p7"]
    assert store.selected_index == 0


def test_move_selection_clamps():
    store = FeedStore()
    store.load(sample_posts(3))
    assert store.move_selection(10)
    assert store.selected_index == 2
    assert not store.move_selection(1)
    assert store.move_selection(-10)
    assert store.selected_index == 0
    assert not store.move_selection(0)


def test_empty_feed_has_no_current_post():
    store = FeedStore()
    assert store.current_post() is None
    assert not store.move_selection(1)
    store.load(sample_posts(2))
    store.set_query("nothing matches this")
    assert store.current_post() is None
