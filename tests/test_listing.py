"""
Tests for the listing filter/sort pipeline and featured selection.
"""

import random
from collections import Counter

import pytest

from groomer_directory.directory.listing import ListingEngine, SortOrder, sort_businesses
from groomer_directory.exceptions import InvalidSortError, ValidationError

from conftest import InMemoryStore, make_business, make_location


# ─── Fixtures ───────────────────────────────────────────────


@pytest.fixture
def camden():
    return make_location(1, "Camden")


@pytest.fixture
def hackney():
    return make_location(2, "Hackney")


@pytest.fixture
def businesses(camden, hackney):
    return [
        make_business(1, "Bubbles", rating=4.8, review_count=40, location=camden,
                      description="Hand finish and breed cuts"),
        make_business(2, "alpha Grooms", rating=4.2, review_count=12, location=camden),
        make_business(3, "Clip Joint", rating=4.8, review_count=40, location=hackney),
        make_business(4, "Doggy Day Spa", rating=None, review_count=None, location=camden,
                      description="Spa treatments"),
        make_business(5, "Event Horizon", rating=3.9, review_count=200, location=hackney),
        make_business(6, "Fluff Stop", rating=4.8, review_count=40, location=camden),
    ]


@pytest.fixture
def store(camden, hackney, businesses):
    return InMemoryStore(
        locations=[camden, hackney],
        businesses=businesses,
        offerings={10: {1, 3, 4}, 11: set()},
    )


@pytest.fixture
def engine(store):
    return ListingEngine(store, rng=random.Random(1234))


def _ids(businesses):
    return [b.id for b in businesses]


# ─── Sorting ────────────────────────────────────────────────


class TestSortOrder:
    """Tests for sort order parsing."""

    def test_parse_values(self):
        assert SortOrder.parse("rating") is SortOrder.RATING
        assert SortOrder.parse("reviews") is SortOrder.REVIEWS
        assert SortOrder.parse(SortOrder.NAME) is SortOrder.NAME

    def test_invalid_sort(self):
        with pytest.raises(InvalidSortError) as exc_info:
            SortOrder.parse("price")
        assert exc_info.value.details["sort"] == "price"
        assert isinstance(exc_info.value, ValidationError)


class TestSortBusinesses:
    """Tests for the sort keys."""

    def test_rating_ties_keep_input_order(self, businesses):
        """Equal rating and review count must preserve relative order."""
        result = sort_businesses(businesses, SortOrder.RATING)
        assert _ids(result)[:3] == [1, 3, 6]

    def test_rating_tie_broken_by_reviews(self):
        items = [
            make_business(1, "A", rating=4.5, review_count=10),
            make_business(2, "B", rating=4.5, review_count=99),
        ]
        assert _ids(sort_businesses(items, SortOrder.RATING)) == [2, 1]

    def test_reviews_sort(self, businesses):
        result = sort_businesses(businesses, SortOrder.REVIEWS)
        assert _ids(result) == [5, 1, 3, 6, 2, 4]

    def test_missing_values_sort_last(self, businesses):
        assert sort_businesses(businesses, SortOrder.RATING)[-1].id == 4

    def test_name_sort_is_case_insensitive(self, businesses):
        result = sort_businesses(businesses, SortOrder.NAME)
        assert [b.name for b in result] == [
            "alpha Grooms", "Bubbles", "Clip Joint", "Doggy Day Spa", "Event Horizon", "Fluff Stop",
        ]

    def test_input_not_mutated(self, businesses):
        before = _ids(businesses)
        sort_businesses(businesses, SortOrder.NAME)
        assert _ids(businesses) == before


# ─── Listing pipeline ───────────────────────────────────────


class TestListBusinesses:
    """Tests for ListingEngine.list_businesses."""

    def test_all_by_rating(self, engine):
        assert _ids(engine.list_businesses()) == [1, 3, 6, 2, 5, 4]

    def test_location_filter(self, engine, camden):
        assert _ids(engine.list_businesses(location_id=camden.id)) == [1, 6, 2, 4]

    def test_exclude(self, engine, camden):
        result = engine.list_businesses(location_id=camden.id, exclude_id=1)
        assert 1 not in _ids(result)
        assert len(result) == 3

    def test_search_name_and_description(self, engine):
        assert _ids(engine.list_businesses(search="spa")) == [4]
        assert _ids(engine.list_businesses(search="BREED")) == [1]

    def test_specialization_is_ordered_subset(self, engine):
        """The specialization filter removes entries without reordering."""
        for sort in SortOrder:
            unfiltered = _ids(engine.list_businesses(sort=sort))
            filtered = _ids(engine.list_businesses(specialization_id=10, sort=sort))
            assert set(filtered) == {1, 3, 4}
            assert filtered == [i for i in unfiltered if i in set(filtered)]

    def test_specialization_without_offerings(self, engine):
        assert engine.list_businesses(specialization_id=11) == []

    def test_sort_accepts_string(self, engine):
        assert _ids(engine.list_businesses(sort="name")) == [2, 1, 3, 4, 5, 6]

    def test_invalid_sort_raises(self, engine):
        with pytest.raises(InvalidSortError):
            engine.list_businesses(sort="distance")

    def test_store_failure_returns_empty(self, store, engine):
        store.fail = True
        assert engine.list_businesses() == []

    def test_is_deterministic(self, engine):
        first = _ids(engine.list_businesses(sort="reviews"))
        assert all(_ids(engine.list_businesses(sort="reviews")) == first for _ in range(5))


# ─── Featured selection ─────────────────────────────────────


class TestSelectFeatured:
    """Tests for the three featured-selection tiers."""

    def test_flagged_business_preferred_over_ratings(self, store, engine, camden):
        flagged = make_business(20, "Low But Featured", rating=2.0, review_count=1,
                                featured=True, location=camden)
        store.businesses.append(flagged)
        assert engine.select_featured(camden.id) is flagged

    def test_first_flagged_wins(self, store, engine, camden):
        first = make_business(20, "First", featured=True, location=camden)
        second = make_business(21, "Second", featured=True, location=camden)
        store.businesses.extend([first, second])
        assert engine.select_featured(camden.id) is first

    def test_random_among_popular(self, engine, camden):
        picked = engine.select_featured(camden.id)
        assert picked.id in {1, 6}

    def test_random_pick_is_seedable(self, store, camden):
        a = ListingEngine(store, rng=random.Random(7)).select_featured(camden.id)
        b = ListingEngine(store, rng=random.Random(7)).select_featured(camden.id)
        assert a is b

    def test_random_pick_covers_all_candidates(self, store, camden):
        engine = ListingEngine(store, rng=random.Random(42))
        counts = Counter(engine.select_featured(camden.id).id for _ in range(400))
        assert set(counts) == {1, 6}
        assert min(counts.values()) > 120

    def test_fallback_to_top_rated(self, camden):
        store = InMemoryStore(
            locations=[camden],
            businesses=[
                make_business(1, "Few Reviews", rating=4.9, review_count=3, location=camden),
                make_business(2, "Good", rating=4.1, review_count=80, location=camden),
                make_business(3, "Also Few", rating=4.9, review_count=9, location=camden),
            ],
        )
        assert ListingEngine(store).select_featured(camden.id).id == 3

    def test_none_when_nothing_qualifies(self, camden):
        store = InMemoryStore(
            locations=[camden],
            businesses=[make_business(1, "Meh", rating=3.5, review_count=100, location=camden)],
        )
        assert ListingEngine(store).select_featured(camden.id) is None

    def test_without_location_considers_all(self, engine):
        assert engine.select_featured().id in {1, 3, 6}

    def test_store_failure_returns_none(self, store, engine, camden):
        store.fail = True
        assert engine.select_featured(camden.id) is None

    def test_featured_excluded_from_list(self, engine, camden):
        featured = engine.select_featured(camden.id)
        listed = engine.list_businesses(location_id=camden.id, exclude_id=featured.id)
        assert featured.id not in _ids(listed)


class TestSelectFeaturedForSpecialization:
    """Tests for the specialization page pick."""

    def test_top_rated_offering(self, engine):
        assert engine.select_featured_for_specialization(10).id == 1

    def test_none_without_offerings(self, engine):
        assert engine.select_featured_for_specialization(11) is None
        assert engine.select_featured_for_specialization(99) is None
