"""Tests for the line bookmark manager."""

from findexa.editor import BookmarkManager


def test_add_remove_and_toggle():
    """Bookmarks behave as a sorted set of lines."""
    bookmarks = BookmarkManager()

    assert bookmarks.add(5)
    assert not bookmarks.add(5)
    assert bookmarks.toggle(2)
    assert list(bookmarks) == [2, 5]
    assert not bookmarks.toggle(2)
    assert bookmarks.remove(5)
    assert not bookmarks.remove(5)
    assert len(bookmarks) == 0


def test_store_interface():
    """The store interface used by sessions maps onto add/remove."""
    bookmarks = BookmarkManager([3])

    bookmarks.set_bookmark(1)
    bookmarks.clear_bookmark(3)
    bookmarks.clear_bookmark(42)

    assert bookmarks.is_bookmarked(1)
    assert 3 not in bookmarks


def test_navigation_between_bookmarks():
    """next_after and previous_before skip to neighbouring bookmarks."""
    bookmarks = BookmarkManager([10, 2, 7])

    assert bookmarks.next_after(2) == 7
    assert bookmarks.next_after(10) is None
    assert bookmarks.previous_before(7) == 2
    assert bookmarks.previous_before(2) is None

    bookmarks.clear()
    assert list(bookmarks) == []
