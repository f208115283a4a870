"""Tests for sorting, filtering and search over mixed lists."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from menuboard.core.items import Announcement, Event, Special
from menuboard.core.listing import (
    FilterOption,
    SortOption,
    build_listing,
    compare_next,
    filter_items,
    search_items,
    sort_items,
)

MT = ZoneInfo("America/Denver")


@pytest.fixture
def now():
    return datetime(2025, 6, 4, 12, 0, tzinfo=MT)


@pytest.fixture
def items():
    """One of each tier, listed in the wrong order."""
    return [
        Event(
            id="past",
            title="Spring Fling",
            start=datetime(2025, 6, 3, 18, 0, tzinfo=MT),
            end=datetime(2025, 6, 3, 22, 0, tzinfo=MT),
            is_active=False,
        ),
        Special(
            id="scheduled",
            title="July Tacos",
            start_date=date(2025, 7, 1),
            is_active=False,
            price_notes="$2 tacos",
        ),
        Event(
            id="trivia",
            title="trivia night",
            start=datetime(2025, 5, 5, 19, 0, tzinfo=MT),
            recurrence_rule="FREQ=WEEKLY;BYDAY=MO",
            description="Teams of four",
        ),
        Special(
            id="brunch",
            title="Brunch",
            type="drink",
            applies_on=["Saturday", "Sunday"],
        ),
        Announcement(
            id="patio",
            title="Patio Open",
            body="Now seating outside",
            publish_at=datetime(2025, 6, 1, 8, 0, tzinfo=MT),
            is_published=True,
        ),
    ]


def ids(items):
    return [i.id for i in items]


class TestCompareNext:
    def test_status_tier_beats_date(self, now, items):
        past, scheduled = items[0], items[1]
        # The past event is closer to now but sorts after the scheduled one
        assert compare_next(scheduled, past, now, MT) < 0
        assert compare_next(past, scheduled, now, MT) > 0

    def test_equal_items(self, now, items):
        assert compare_next(items[2], items[2], now, MT) == 0

    def test_same_tier_earlier_date_first(self, now, items):
        trivia, brunch = items[2], items[3]
        # Monday June 9 vs Saturday June 7
        assert compare_next(brunch, trivia, now, MT) < 0


class TestSortNext:
    def test_default_order(self, now, items):
        result = sort_items(items, SortOption.NEXT, now, MT)
        assert ids(result) == ["patio", "brunch", "trivia", "scheduled", "past"]

    def test_idempotent(self, now, items):
        once = sort_items(items, SortOption.NEXT, now, MT)
        twice = sort_items(once, SortOption.NEXT, now, MT)
        assert ids(once) == ids(twice)
        assert ids(sort_items(items, "next", now, MT)) == ids(once)

    def test_stable_for_ties(self, now):
        start = datetime(2025, 6, 10, 18, 0, tzinfo=MT)
        a = Event(id="a", title="A", start=start)
        b = Event(id="b", title="B", start=start)
        assert ids(sort_items([b, a], SortOption.NEXT, now, MT)) == ["b", "a"]
        assert ids(sort_items([a, b], SortOption.NEXT, now, MT)) == ["a", "b"]

    def test_bad_rule_does_not_break_sort(self, now, items):
        broken = Event(
            id="broken",
            title="Broken",
            start=datetime(2025, 5, 5, 19, 0, tzinfo=MT),
            recurrence_rule="FREQ=SOMETIMES",
        )
        result = sort_items([broken, *items], SortOption.NEXT, now, MT)
        # Same tier as the other active items, but last within it
        assert ids(result) == ["patio", "brunch", "trivia", "broken", "scheduled", "past"]

    def test_requires_now(self, items):
        with pytest.raises(ValueError):
            sort_items(items, SortOption.NEXT)


class TestOtherSorts:
    def test_date_newest_first(self, now, items):
        result = sort_items(items, SortOption.DATE, now, MT)
        assert ids(result) == ["scheduled", "trivia", "brunch", "past", "patio"]

    def test_date_oldest_first(self, now, items):
        result = sort_items(items, SortOption.DATE_OLDEST, now, MT)
        assert ids(result) == ["patio", "past", "brunch", "trivia", "scheduled"]

    def test_title_case_insensitive(self, items):
        result = sort_items(items, SortOption.TITLE)
        assert [i.title for i in result] == ["Brunch", "July Tacos", "Patio Open", "Spring Fling", "trivia night"]

    def test_title_descending(self, items):
        result = sort_items(items, SortOption.TITLE_DESC)
        assert result[0].title == "trivia night"
        assert result[-1].title == "Brunch"

    def test_type_grouping_is_stable(self, items):
        result = sort_items(items, SortOption.TYPE)
        assert ids(result) == ["past", "trivia", "scheduled", "brunch", "patio"]

    def test_unknown_option(self, now, items):
        with pytest.raises(ValueError):
            sort_items(items, "popularity", now, MT)


class TestFilterItems:
    def test_all(self, items):
        assert filter_items(items, FilterOption.ALL) == items

    def test_by_kind(self, items):
        assert ids(filter_items(items, FilterOption.EVENTS)) == ["past", "trivia"]
        assert ids(filter_items(items, FilterOption.SPECIALS)) == ["scheduled", "brunch"]
        assert ids(filter_items(items, FilterOption.ANNOUNCEMENTS)) == ["patio"]

    def test_active_uses_published_for_announcements(self, items):
        assert ids(filter_items(items, FilterOption.ACTIVE)) == ["trivia", "brunch", "patio"]
        assert ids(filter_items(items, FilterOption.INACTIVE)) == ["past", "scheduled"]

    def test_special_types(self, items):
        assert ids(filter_items(items, "food")) == ["scheduled"]
        assert ids(filter_items(items, "drink")) == ["brunch"]
        assert ids(filter_items(items, "weekly")) == ["brunch"]


class TestSearchItems:
    def test_blank_query_returns_all(self, items):
        assert search_items(items, "  ") == items
        assert search_items(items, None) == items

    def test_matches_title_case_insensitive(self, items):
        assert ids(search_items(items, "TRIVIA")) == ["trivia"]

    def test_matches_other_fields(self, items):
        assert ids(search_items(items, "teams")) == ["trivia"]
        assert ids(search_items(items, "$2")) == ["scheduled"]
        assert ids(search_items(items, "outside")) == ["patio"]

    def test_no_match(self, items):
        assert search_items(items, "karaoke") == []


class TestBuildListing:
    def test_pipeline(self, now, items):
        result = build_listing(items, now, MT, sort="title", filter_option="active", query="n")
        assert ids(result) == ["brunch", "patio", "trivia"]
