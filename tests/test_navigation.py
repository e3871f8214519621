"""Tests for display-side navigation."""

import pytest

from git_file_history.core.navigation import (
    LOOKAHEAD,
    SCROLL_THRESHOLD_PX,
    NavigationController,
)
from git_file_history.models import Commit, Page


def make_page(start: int, count: int, has_more: bool = True) -> Page:
    commits = [
        Commit(hash=f"h{i:02d}", author="a", date="2024-01-01T00:00:00Z", message=f"m{i}")
        for i in range(start, start + count)
    ]
    return Page(commits=commits, has_more=has_more)


@pytest.fixture
def nav():
    controller = NavigationController()
    controller.begin_request()
    controller.append(make_page(0, 15))
    return controller


def test_initial_state():
    controller = NavigationController()

    assert controller.commits == []
    assert controller.has_more is True
    assert controller.cursor is None
    assert controller.current_pair() is None


def test_pair_is_newer_then_older(nav):
    newer, older = nav.current_pair()
    assert (newer.hash, older.hash) == ("h00", "h01")

    nav.select(3)
    newer, older = nav.current_pair()
    assert (newer.hash, older.hash) == ("h03", "h04")


def test_single_commit_has_no_pair():
    controller = NavigationController()
    controller.append(make_page(0, 1, has_more=False))

    assert controller.has_diff is False
    assert controller.current_pair() is None


def test_index_is_clamped_to_diffable_range(nav):
    assert nav.select(-5) == 0
    assert nav.previous() == 0
    # The oldest loaded commit has nothing older to diff against
    assert nav.select(100) == 13
    assert nav.next() == 13


def test_append_keeps_position(nav):
    nav.select(9)
    nav.begin_request()
    nav.append(make_page(15, 5, has_more=False))

    assert nav.current_index == 9
    assert len(nav.commits) == 20
    assert nav.has_more is False
    assert nav.in_flight is False
    assert nav.cursor == "h19"


def test_cursor_is_oldest_loaded_hash(nav):
    assert nav.cursor == "h14"
    assert nav.begin_request() == "h14"
    assert nav.in_flight is True


def test_prefetch_window(nav):
    threshold = len(nav.commits) - LOOKAHEAD

    nav.select(threshold - 1)
    assert nav.should_prefetch() is False
    nav.select(threshold)
    assert nav.should_prefetch() is True


def test_no_prefetch_while_in_flight_or_exhausted(nav):
    nav.select(13)
    nav.begin_request()
    assert nav.should_prefetch() is False

    nav.append(make_page(15, 2, has_more=False))
    nav.select(15)
    assert nav.should_prefetch() is False
    assert nav.can_load_more() is False


def test_scroll_threshold(nav):
    assert nav.should_prefetch_on_scroll(0, 3000, 1000) is False
    assert nav.should_prefetch_on_scroll(3000 - 1000 - SCROLL_THRESHOLD_PX, 3000, 1000) is False
    assert nav.should_prefetch_on_scroll(3000 - 1000 - SCROLL_THRESHOLD_PX + 1, 3000, 1000) is True


def test_failure_clears_in_flight_and_keeps_commits(nav):
    nav.begin_request()
    nav.fail()

    assert nav.in_flight is False
    assert len(nav.commits) == 15
    assert nav.can_load_more() is True
