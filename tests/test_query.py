# ABOUTME: Tests for the query engine.
# ABOUTME: Covers default filters, the empty-category asymmetry, ordering and limits.

from datetime import datetime

import pytest
from conftest import T1, T2, T3, make_feed, make_item

from esqimo.store.builder import build_snapshot
from esqimo.store.query import effective_categories, effective_titles, select_items


@pytest.fixture
def snapshot(news_feed, sports_feed):
    return build_snapshot([news_feed, sports_feed])


def guids(items) -> list[str]:
    return [item.guid for item in items]


class TestEffectiveFilters:
    """Tests for filter defaulting."""

    def test_titles_default_to_all(self, snapshot) -> None:
        assert effective_titles(snapshot, []) == frozenset({"News", "Sports"})

    def test_titles_explicit(self, snapshot) -> None:
        assert effective_titles(snapshot, ["Sports"]) == frozenset({"Sports"})

    def test_categories_default_includes_empty(self, snapshot) -> None:
        assert effective_categories(snapshot, []) == snapshot.categories | {""}

    def test_categories_explicit_used_as_given(self, snapshot) -> None:
        assert effective_categories(snapshot, ["tech"]) == frozenset({"tech"})

    def test_default_filter_does_not_change_snapshot(self, snapshot) -> None:
        """Adding "" to the default filter must not leak into the snapshot."""
        effective_categories(snapshot, [])
        select_items(snapshot)

        assert "" not in snapshot.categories


class TestSelectItems:
    """Tests for select_items."""

    def test_scenario_no_filters(self, news_feed) -> None:
        """News with A (no category, t1) and B (tech, t2) gives [B, A]."""
        snapshot = build_snapshot([news_feed])

        assert guids(select_items(snapshot, [], [], 0)) == ["B", "A"]

    def test_scenario_explicit_category_excludes_uncategorised(self, news_feed) -> None:
        snapshot = build_snapshot([news_feed])

        assert guids(select_items(snapshot, [], ["tech"], 0)) == ["B"]

    def test_scenario_limit_one(self, news_feed) -> None:
        snapshot = build_snapshot([news_feed])

        assert guids(select_items(snapshot, [], [], 1)) == ["B"]

    def test_explicit_empty_category_includes_uncategorised(self, snapshot) -> None:
        assert guids(select_items(snapshot, categories=["tech", ""])) == ["B", "A"]

    def test_title_filter(self, snapshot) -> None:
        assert guids(select_items(snapshot, titles=["Sports"])) == ["S1", "S2"]

    def test_unknown_title_matches_nothing(self, snapshot) -> None:
        assert select_items(snapshot, titles=["Weather"]) == []

    def test_unknown_category_matches_nothing(self, snapshot) -> None:
        assert select_items(snapshot, categories=["cooking"]) == []

    def test_combined_filters(self, snapshot) -> None:
        assert guids(select_items(snapshot, titles=["News"], categories=["football"])) == []
        assert guids(select_items(snapshot, titles=["Sports"], categories=["tennis"])) == ["S2"]

    def test_sorted_most_recent_first_undated_last(self, snapshot) -> None:
        """S1 (t3) > B (t2) > A (t1) > S2 (no date)."""
        assert guids(select_items(snapshot)) == ["S1", "B", "A", "S2"]

    def test_adjacent_items_are_ordered(self, snapshot) -> None:
        items = select_items(snapshot)
        dates = [item.published_parsed for item in items]

        for earlier, later in zip(dates, dates[1:], strict=False):
            if later is not None:
                assert earlier is not None
                assert earlier >= later

    def test_naive_and_aware_dates_compare(self) -> None:
        """Mixed naive and aware datetimes must not raise."""
        feed = make_feed(
            "Mixed",
            [
                make_item("naive", published_parsed=datetime(2024, 3, 2, 12, 0)),
                make_item("aware", published_parsed=T3),
                make_item("old", published_parsed=T1),
            ],
        )
        snapshot = build_snapshot([feed])

        assert guids(select_items(snapshot)) == ["aware", "naive", "old"]

    def test_all_undated(self) -> None:
        feed = make_feed("Undated", [make_item("x"), make_item("y")])
        snapshot = build_snapshot([feed])

        assert sorted(guids(select_items(snapshot))) == ["x", "y"]

    def test_limit_zero_returns_all(self, snapshot) -> None:
        assert len(select_items(snapshot, limit=0)) == 4

    def test_limit_at_or_beyond_length_returns_all(self, snapshot) -> None:
        everything = select_items(snapshot)

        assert select_items(snapshot, limit=4) == everything
        assert select_items(snapshot, limit=100) == everything

    def test_limit_truncates_after_sorting(self, snapshot) -> None:
        assert guids(select_items(snapshot, limit=2)) == ["S1", "B"]

    def test_negative_limit_means_no_limit(self, snapshot) -> None:
        assert len(select_items(snapshot, limit=-1)) == 4

    def test_empty_snapshot(self) -> None:
        assert select_items(build_snapshot([])) == []

    def test_duplicate_title_keeps_later_items(self) -> None:
        """Two feeds titled News: only the later feed's items are returned."""
        first = make_feed("News", [make_item("A", published_parsed=T1)])
        second = make_feed("News", [make_item("Z", published_parsed=T2)])
        snapshot = build_snapshot([first, second])

        assert guids(select_items(snapshot)) == ["Z"]
