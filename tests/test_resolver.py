"""
Tests for path segment resolution.

Resolver tests run against the in-memory store; no database required.
"""

import pytest

from groomer_directory.directory.resolver import (
    NOT_FOUND,
    EntityKind,
    EntityResolver,
    Resolution,
    find_slug_collisions,
    resolve_path_segment,
)
from groomer_directory.exceptions import AmbiguousSlugError, MalformedSegmentError, ResolutionError

from conftest import InMemoryStore, make_business, make_location, make_specialization


# ─── Fixtures ───────────────────────────────────────────────


@pytest.fixture
def camden():
    return make_location(1, "Camden")


@pytest.fixture
def store(camden):
    north = make_location(2, "North London")
    chelsea = make_location(3, "Chelsea")
    return InMemoryStore(
        locations=[camden, north, chelsea],
        specializations=[
            make_specialization(1, "Puppy Grooming"),
            make_specialization(2, "Chelsea Boots"),
            make_specialization(3, "Spa Treatments"),
        ],
        businesses=[
            make_business(1, "Posh Paws", slug="posh-paws", location=camden),
            make_business(2, "Muddy Mutts & Co", location=north),
        ],
    )


@pytest.fixture
def resolver(store):
    return EntityResolver(store)


# ─── Pure resolution ────────────────────────────────────────


class TestResolvePathSegment:
    """Tests for resolution order and matching rules."""

    def _resolve(self, store, segment):
        return resolve_path_segment(
            segment, store.locations, store.specializations, store.get_business_by_slug
        )

    def test_location_exact_match(self, store):
        result = self._resolve(store, "north-london")
        assert result.kind is EntityKind.LOCATION
        assert result.entity.name == "North London"

    def test_location_match_is_case_insensitive(self, store):
        result = self._resolve(store, "CAMDEN")
        assert result.kind is EntityKind.LOCATION

    def test_exact_location_beats_fuzzy_specialization(self, store):
        """'chelsea' is the Chelsea location, not the 'Chelsea Boots' specialization."""
        result = self._resolve(store, "chelsea")
        assert result.kind is EntityKind.LOCATION
        assert result.entity.name == "Chelsea"

    def test_specialization_exact_match(self, store):
        result = self._resolve(store, "puppy-grooming")
        assert result.kind is EntityKind.SPECIALIZATION
        assert result.entity.name == "Puppy Grooming"

    def test_business_stored_slug(self, store):
        result = self._resolve(store, "posh-paws")
        assert result.kind is EntityKind.BUSINESS
        assert result.entity.id == 1

    def test_business_derived_slug(self, store):
        result = self._resolve(store, "muddy-mutts-and-co")
        assert result.kind is EntityKind.BUSINESS
        assert result.entity.id == 2

    def test_fuzzy_location_fallback(self, store):
        result = self._resolve(store, "north")
        assert result.kind is EntityKind.LOCATION
        assert result.entity.name == "North London"

    def test_fuzzy_takes_first_in_store_order(self):
        locations = [make_location(1, "East Ham"), make_location(2, "West Ham")]
        result = resolve_path_segment("ham", locations, [], lambda slug: None)
        assert result.entity.name == "East Ham"

    def test_business_beats_fuzzy_location(self):
        locations = [make_location(1, "Posh Paws Village")]
        business = make_business(7, "Posh Paws", slug="posh-paws")
        result = resolve_path_segment(
            "posh-paws", locations, [], lambda slug: business if slug == "posh-paws" else None
        )
        assert result.kind is EntityKind.BUSINESS

    def test_not_found(self, store):
        result = self._resolve(store, "atlantis")
        assert result is NOT_FOUND
        assert not result.found
        assert result.canonical_slug is None

    def test_empty_segment_not_found(self, store):
        """An empty segment must not fuzzy-match every location."""
        assert self._resolve(store, "") is NOT_FOUND
        assert self._resolve(store, "---") is NOT_FOUND

    def test_ambiguous_location_and_specialization(self):
        locations = [make_location(1, "Mayfair")]
        specializations = [make_specialization(1, "Mayfair")]
        with pytest.raises(AmbiguousSlugError) as exc_info:
            resolve_path_segment("mayfair", locations, specializations, lambda slug: None)
        assert exc_info.value.details["location"] == "Mayfair"
        assert exc_info.value.details["specialization"] == "Mayfair"

    def test_punctuated_name_matches_its_slug(self):
        """Names with punctuation resolve from the slug the sitemap emits."""
        specializations = [make_specialization(1, "Wash & Dry")]
        result = resolve_path_segment("wash-and-dry", [], specializations, lambda slug: None)
        assert result.kind is EntityKind.SPECIALIZATION

    def test_nul_byte_is_malformed(self, store):
        with pytest.raises(MalformedSegmentError):
            self._resolve(store, "camden\x00")


class TestResolution:
    """Tests for canonical slug and redirect decisions."""

    def test_canonical_slug_for_location(self):
        resolution = Resolution(EntityKind.LOCATION, make_location(1, "North London"))
        assert resolution.canonical_slug == "north-london"
        assert resolution.needs_redirect("north") is True
        assert resolution.needs_redirect("north-london") is False

    def test_canonical_slug_for_business_prefers_stored(self):
        resolution = Resolution(EntityKind.BUSINESS, make_business(1, "Posh Paws", slug="posh-paws-nw1"))
        assert resolution.canonical_slug == "posh-paws-nw1"

    def test_not_found_never_redirects(self):
        assert NOT_FOUND.needs_redirect("anything") is False


# ─── Store-backed resolver ──────────────────────────────────


class TestEntityResolver:
    """Tests for EntityResolver against a store."""

    def test_resolve(self, resolver):
        assert resolver.resolve("camden").kind is EntityKind.LOCATION

    def test_store_failure_is_not_found(self, store, resolver):
        store.fail = True
        assert resolver.resolve("camden") is NOT_FOUND

    def test_ambiguity_propagates(self, store, resolver):
        store.specializations.append(make_specialization(9, "Camden"))
        with pytest.raises(ResolutionError):
            resolver.resolve("camden")

    def test_resolve_location_by_slug(self, resolver):
        assert resolver.resolve_location("north-london").name == "North London"
        assert resolver.resolve_location("North-London").name == "North London"
        assert resolver.resolve_location("north") is None

    def test_resolve_specialization_exact(self, resolver):
        assert resolver.resolve_specialization("spa-treatments").name == "Spa Treatments"

    def test_resolve_specialization_fuzzy(self, resolver):
        assert resolver.resolve_specialization("spa") is None
        assert resolver.resolve_specialization("spa", fuzzy=True).name == "Spa Treatments"

    def test_resolve_specialization_store_failure(self, store, resolver):
        store.fail = True
        assert resolver.resolve_specialization("spa-treatments", fuzzy=True) is None


class TestSlugCollisions:
    """Tests for collision detection."""

    def test_no_collisions(self, resolver):
        assert resolver.find_collisions() == {}

    def test_location_specialization_collision(self):
        collisions = find_slug_collisions(
            [make_location(1, "Mayfair")],
            [make_specialization(1, "Mayfair")],
        )
        assert collisions == {"mayfair": ["location:Mayfair", "specialization:Mayfair"]}

    def test_business_collision(self):
        collisions = find_slug_collisions(
            [make_location(1, "Camden")],
            [],
            [make_business(1, "Camden", slug=None)],
        )
        assert "camden" in collisions
