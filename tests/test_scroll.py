"""Tests for the scroll window calculator."""

from redditview.scroll import (
    DETAIL_MARGIN,
    clamp_offset,
    list_window_start,
    max_offset,
    scroll_by,
    scroll_to_end,
    scroll_window,
)


def test_window_from_top():
    window = scroll_window(list(range(50)), 20, 0, 3)
    assert window.max_offset == 50 - 20 + 3
    assert window.offset == 0
    assert window.visible == list(range(17))


def test_window_clamps_past_end():
    window = scroll_window(list(range(50)), 20, 500, 3)
    assert window.offset == 33
    assert window.visible == list(range(33, 50))


def test_window_clamps_negative():
    window = scroll_window(list(range(50)), 20, -4, 3)
    assert window.offset == 0


def test_short_content_does_not_scroll():
    window = scroll_window(["a", "b"], 20, 5, DETAIL_MARGIN)
    assert window.max_offset == 0
    assert window.visible == ["a", "b"]


def test_viewport_smaller_than_margin_still_shows_a_row():
    window = scroll_window(list(range(10)), 2, 0, 3)
    assert window.visible == [0]
    assert window.max_offset == 9


def test_offset_always_in_bounds():
    for total in range(0, 30, 3):
        for height in range(0, 25, 4):
            for offset in (-10, 0, 1, 7, 100):
                top = max_offset(total, height, 3)
                assert top >= 0
                clamped = clamp_offset(offset, total, height, 3)
                assert 0 <= clamped <= top
                assert scroll_window(list(range(total)), height, offset, 3).offset == clamped


def test_scroll_by_and_end():
    assert scroll_by(30, 10, 50, 20, 3) == 33
    assert scroll_by(2, -5, 50, 20, 3) == 0
    assert scroll_by(0, 1, 5, 20, 3) == 0
    assert scroll_to_end(50, 20, 3) == 33


def test_list_window_keeps_selection_visible():
    assert list_window_start(0, 100, 10) == 0
    assert list_window_start(15, 100, 10) == 6
    assert list_window_start(99, 100, 10) == 90
    assert list_window_start(3, 5, 10) == 0


def test_list_window_moves_only_when_selection_leaves_it():
    assert list_window_start(14, 100, 10, start=6) == 6
    assert list_window_start(5, 100, 10, start=6) == 5
    assert list_window_start(16, 100, 10, start=6) == 7
    assert list_window_start(50, 60, 10, start=55) == 50
    assert list_window_start(59, 60, 10, start=80) == 50
