"""
Path segment resolution.

A single URL segment may name a location, a specialization or a business.
Candidates are tried in a fixed order, first match wins:

    1. location whose name equals the segment (hyphens read as spaces)
    2. specialization whose name equals the segment
    3. business whose slug equals the segment
    4. location whose name contains the segment (fuzzy fallback)

Names also match when their slug equals the segment, so every URL the
sitemap emits resolves back to its entity. A segment naming both a
location and a specialization is reported as ``AmbiguousSlugError``
rather than silently shadowing the specialization.
"""

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Sequence

from groomer_directory.directory.slugs import business_slug, normalize_to_slug
from groomer_directory.exceptions import (
    AmbiguousSlugError,
    DatabaseError,
    MalformedSegmentError,
)
from groomer_directory.logging_config import get_logger

if TYPE_CHECKING:
    from groomer_directory.data.models import Business, Location, Specialization
    from groomer_directory.data.repository import DirectoryStore

logger = get_logger(__name__)


class EntityKind(str, enum.Enum):
    LOCATION = "location"
    SPECIALIZATION = "specialization"
    BUSINESS = "business"
    NONE = "none"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a segment. ``kind`` NONE means not found."""

    kind: EntityKind
    entity: Any = None

    @property
    def found(self) -> bool:
        return self.kind is not EntityKind.NONE

    @property
    def canonical_slug(self) -> Optional[str]:
        """The slug the resolved entity should be served under."""
        if self.kind is EntityKind.BUSINESS:
            return business_slug(self.entity)
        if self.kind in (EntityKind.LOCATION, EntityKind.SPECIALIZATION):
            return normalize_to_slug(self.entity.name)
        return None

    def needs_redirect(self, segment: str) -> bool:
        """True when the entity was found under a non-canonical segment."""
        return self.found and self.canonical_slug != segment


NOT_FOUND = Resolution(EntityKind.NONE)


def _check_segment(segment: str) -> None:
    if "\x00" in segment:
        raise MalformedSegmentError(segment)


def _dehyphenate(segment: str) -> str:
    return segment.replace("-", " ").strip()


def _names_match(name: str, segment: str) -> bool:
    """Exact, case-insensitive match of a display name against a segment."""
    if name.casefold() == _dehyphenate(segment).casefold():
        return True
    slug = normalize_to_slug(name)
    return bool(slug) and slug == segment.lower()


def _first_exact(candidates: Iterable[Any], segment: str) -> Optional[Any]:
    return next((c for c in candidates if _names_match(c.name, segment)), None)


def resolve_path_segment(
    segment: str,
    locations: Sequence["Location"],
    specializations: Sequence["Specialization"],
    business_lookup: Callable[[str], Optional["Business"]],
) -> Resolution:
    """
    Resolve a URL segment against the directory's entities.

    Args:
        segment: The raw path segment, e.g. 'north-london'.
        locations: Locations in store order.
        specializations: Specializations in store order.
        business_lookup: Finds a business by slug, or returns None.

    Returns:
        The first matching entity, or NOT_FOUND.

    Raises:
        MalformedSegmentError: If the segment contains a NUL byte.
        AmbiguousSlugError: If the segment names both a location and a
            specialization exactly.
    """
    _check_segment(segment)
    if not _dehyphenate(segment):
        return NOT_FOUND

    location = _first_exact(locations, segment)
    specialization = _first_exact(specializations, segment)
    if location is not None and specialization is not None:
        raise AmbiguousSlugError(segment, location.name, specialization.name)
    if location is not None:
        return Resolution(EntityKind.LOCATION, location)
    if specialization is not None:
        return Resolution(EntityKind.SPECIALIZATION, specialization)

    business = business_lookup(segment)
    if business is not None:
        return Resolution(EntityKind.BUSINESS, business)

    needle = _dehyphenate(segment).casefold()
    for candidate in locations:
        if needle in candidate.name.casefold():
            return Resolution(EntityKind.LOCATION, candidate)

    return NOT_FOUND


def find_slug_collisions(
    locations: Iterable["Location"],
    specializations: Iterable["Specialization"],
    businesses: Iterable["Business"] = (),
) -> dict[str, list[str]]:
    """
    Slugs claimed by more than one entity.

    Returns:
        Mapping of slug → labels such as 'location:Camden' for every slug
        shared by two or more entities. Empty when there are no collisions.
    """
    claims: dict[str, list[str]] = {}
    for loc in locations:
        claims.setdefault(normalize_to_slug(loc.name), []).append(f"location:{loc.name}")
    for spec in specializations:
        claims.setdefault(normalize_to_slug(spec.name), []).append(f"specialization:{spec.name}")
    for business in businesses:
        claims.setdefault(business_slug(business), []).append(f"business:{business.name}")
    return {slug: labels for slug, labels in claims.items() if len(labels) > 1}


class EntityResolver:
    """
    Store-backed resolver used by the page routes.

    Data-access failures are logged and reported as not found, so a broken
    store renders a 404 page instead of an error.
    """

    def __init__(self, store: "DirectoryStore"):
        self.store = store

    def resolve(self, segment: str) -> Resolution:
        """Resolve a top-level path segment (see module docstring for order)."""
        _check_segment(segment)
        try:
            locations = self.store.list_locations()
            specializations = self.store.list_specializations()
            resolution = resolve_path_segment(
                segment, locations, specializations, self.store.get_business_by_slug
            )
        except DatabaseError as e:
            logger.error("Resolution of '%s' failed: %s", segment, e)
            return NOT_FOUND

        logger.debug("Resolved '%s' → %s", segment, resolution.kind.value)
        return resolution

    def resolve_location(self, slug: str) -> Optional["Location"]:
        """Location whose slug equals ``slug`` (case-insensitive), if any."""
        _check_segment(slug)
        try:
            locations = self.store.list_locations()
        except DatabaseError as e:
            logger.error("Location lookup for '%s' failed: %s", slug, e)
            return None
        wanted = slug.lower()
        location = next((loc for loc in locations if normalize_to_slug(loc.name) == wanted), None)
        if location is None:
            logger.info("No location found matching slug '%s'", slug)
        return location

    def resolve_specialization(self, slug: str, fuzzy: bool = False) -> Optional["Specialization"]:
        """
        Specialization named by ``slug``.

        Tries an exact name match, then slug equality, then (when ``fuzzy``)
        the first specialization whose name contains the de-hyphenated slug.
        """
        _check_segment(slug)
        name = _dehyphenate(slug)
        if not name:
            return None
        try:
            exact = self.store.find_specialization_by_name(name)
            if exact is not None:
                return exact
            wanted = slug.lower()
            for spec in self.store.list_specializations():
                if normalize_to_slug(spec.name) == wanted:
                    return spec
            if fuzzy:
                matches = self.store.search_specializations(name)
                if matches:
                    logger.info("Specialization '%s' matched fuzzily to '%s'", slug, matches[0].name)
                    return matches[0]
        except DatabaseError as e:
            logger.error("Specialization lookup for '%s' failed: %s", slug, e)
        return None

    def find_collisions(self) -> dict[str, list[str]]:
        """Slug collisions across all stored entities."""
        return find_slug_collisions(
            self.store.list_locations(),
            self.store.list_specializations(),
            self.store.list_businesses(),
        )
