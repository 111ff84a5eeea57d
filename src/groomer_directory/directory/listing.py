"""
Listing filter, sort and featured selection.

The listing pipeline runs in a fixed order: base set (optionally one
location) → exclusion → free-text search → stable sort → specialization
post-filter. The specialization join is queried separately and applied
after sorting, so it only ever removes entries and never reorders them.

Featured selection is a separate call composed by the page:

    1. a business explicitly flagged ``featured``
    2. a random pick among businesses rated >= 4.5 with >= 15 reviews
    3. the highest rated business (ties by review count) rated >= 4.0

The random source is injected so tests can seed it; production draws
fresh randomness on every call.
"""

import enum
import random
from typing import TYPE_CHECKING, Optional

from groomer_directory.exceptions import DatabaseError, InvalidSortError
from groomer_directory.logging_config import get_logger

if TYPE_CHECKING:
    from groomer_directory.data.models import Business
    from groomer_directory.data.repository import DirectoryStore

logger = get_logger(__name__)

FEATURED_MIN_RATING = 4.5
FEATURED_MIN_REVIEWS = 15
FALLBACK_MIN_RATING = 4.0


class SortOrder(str, enum.Enum):
    RATING = "rating"
    REVIEWS = "reviews"
    NAME = "name"

    @classmethod
    def parse(cls, value: "SortOrder | str") -> "SortOrder":
        """Coerce a query value to a SortOrder, raising InvalidSortError."""
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidSortError(str(value)) from e


def _rating(business: "Business") -> float:
    return business.rating if business.rating is not None else -1.0


def _reviews(business: "Business") -> int:
    return business.review_count if business.review_count is not None else -1


def sort_businesses(businesses: list["Business"], sort: SortOrder) -> list["Business"]:
    """
    Stable sort by the requested order.

    Missing ratings and review counts sort after every real value.
    """
    if sort is SortOrder.RATING:
        return sorted(businesses, key=lambda b: (_rating(b), _reviews(b)), reverse=True)
    if sort is SortOrder.REVIEWS:
        return sorted(businesses, key=lambda b: (_reviews(b), _rating(b)), reverse=True)
    return sorted(businesses, key=lambda b: b.name.casefold())


def matches_search(business: "Business", search: str) -> bool:
    needle = search.casefold()
    return needle in business.name.casefold() or needle in (business.description or "").casefold()


class ListingEngine:
    """
    Builds business listings from an injected store.

    Args:
        store: Data access collaborator (a DirectoryRepository in production).
        rng: Random source for the featured pick. Defaults to a fresh
             ``random.Random()``.
    """

    def __init__(self, store: "DirectoryStore", rng: random.Random | None = None):
        self.store = store
        self.rng = rng or random.Random()

    def list_businesses(
        self,
        location_id: int | None = None,
        specialization_id: int | None = None,
        search: str | None = None,
        sort: SortOrder | str = SortOrder.RATING,
        exclude_id: int | None = None,
    ) -> list["Business"]:
        """
        Filtered, sorted businesses.

        Returns an empty list if the store fails; the failure is logged.

        Raises:
            InvalidSortError: If ``sort`` is not a known order.
        """
        order = SortOrder.parse(sort)
        try:
            businesses = self.store.list_businesses(location_id=location_id)
            if exclude_id is not None:
                businesses = [b for b in businesses if b.id != exclude_id]
            if search:
                businesses = [b for b in businesses if matches_search(b, search)]
            businesses = sort_businesses(businesses, order)
            if specialization_id is not None:
                offering = self.store.business_ids_for_specialization(specialization_id)
                businesses = [b for b in businesses if b.id in offering]
        except DatabaseError as e:
            logger.error(
                "Listing failed (location=%s, specialization=%s): %s",
                location_id, specialization_id, e,
            )
            return []

        logger.debug(
            "Listed %d businesses (location=%s, specialization=%s, search=%r, sort=%s)",
            len(businesses), location_id, specialization_id, search, order.value,
        )
        return businesses

    def select_featured(self, location_id: int | None = None) -> Optional["Business"]:
        """
        Pick the business to highlight above a listing.

        Args:
            location_id: Restrict candidates to one location; None for all.

        Returns:
            The featured business, or None when no candidate qualifies or the
            store fails.
        """
        try:
            flagged = self.store.list_businesses(location_id=location_id, featured=True)
            if flagged:
                return flagged[0]

            popular = self.store.list_businesses(
                location_id=location_id,
                min_rating=FEATURED_MIN_RATING,
                min_reviews=FEATURED_MIN_REVIEWS,
            )
            if popular:
                return self.rng.choice(popular)

            rated = self.store.list_businesses(location_id=location_id, min_rating=FALLBACK_MIN_RATING)
        except DatabaseError as e:
            logger.error("Featured selection failed (location=%s): %s", location_id, e)
            return None

        if not rated:
            return None
        return sort_businesses(rated, SortOrder.RATING)[0]

    def select_featured_for_specialization(self, specialization_id: int) -> Optional["Business"]:
        """Highest rated business (ties by review count) offering a specialization."""
        try:
            ids = self.store.business_ids_for_specialization(specialization_id)
            if not ids:
                return None
            candidates = self.store.list_businesses(ids=ids)
        except DatabaseError as e:
            logger.error("Featured selection failed (specialization=%s): %s", specialization_id, e)
            return None
        if not candidates:
            return None
        return sort_businesses(candidates, SortOrder.RATING)[0]
