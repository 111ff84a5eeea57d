"""
Shared fixtures: an in-memory DirectoryStore fake and SQLite-backed sessions.
"""

import pytest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from groomer_directory.data.database import Base
from groomer_directory.data.models import Business, Location, Specialization
from groomer_directory.data.repository import DirectoryRepository
from groomer_directory.directory.slugs import normalize_to_slug
from groomer_directory.exceptions import DatabaseQueryError


# ─── In-memory store ────────────────────────────────────────


def make_location(id, name):
    return Location(id=id, name=name)


def make_specialization(id, name, description=None):
    return Specialization(id=id, name=name, description=description)


def make_business(id, name, rating=None, review_count=None, featured=False, location=None, **kwargs):
    """Transient Business; ``featured`` is set explicitly since column defaults apply only on insert."""
    business = Business(
        id=id,
        name=name,
        rating=rating,
        review_count=review_count,
        featured=featured,
        **kwargs,
    )
    if location is not None:
        business.location = location
        business.location_id = location.id
    return business


class InMemoryStore:
    """
    DirectoryStore fake holding plain lists, in insertion order.

    Set ``fail = True`` to make every query raise DatabaseQueryError.
    """

    def __init__(self, locations=(), specializations=(), businesses=(), offerings=None):
        self.locations = list(locations)
        self.specializations = list(specializations)
        self.businesses = list(businesses)
        self.offerings = {k: set(v) for k, v in (offerings or {}).items()}
        self.fail = False
        self.calls = []

    def _query(self, name):
        self.calls.append(name)
        if self.fail:
            raise DatabaseQueryError(f"{name} failed: store unavailable")

    def list_locations(self):
        self._query("list_locations")
        return list(self.locations)

    def list_specializations(self):
        self._query("list_specializations")
        return list(self.specializations)

    def find_location_by_name(self, name):
        self._query("find_location_by_name")
        return next((loc for loc in self.locations if loc.name.lower() == name.lower()), None)

    def find_specialization_by_name(self, name):
        self._query("find_specialization_by_name")
        return next((s for s in self.specializations if s.name.lower() == name.lower()), None)

    def search_specializations(self, text):
        self._query("search_specializations")
        return [s for s in self.specializations if text.lower() in s.name.lower()]

    def get_location(self, location_id):
        self._query("get_location")
        return next((loc for loc in self.locations if loc.id == location_id), None)

    def get_specialization(self, specialization_id):
        self._query("get_specialization")
        return next((s for s in self.specializations if s.id == specialization_id), None)

    def get_business(self, business_id):
        self._query("get_business")
        return next((b for b in self.businesses if b.id == business_id), None)

    def get_business_by_slug(self, slug):
        self._query("get_business_by_slug")
        for b in self.businesses:
            if b.slug == slug or (b.slug is None and normalize_to_slug(b.name) == slug):
                return b
        return None

    def list_businesses(self, location_id=None, featured=None, min_rating=None, min_reviews=None, ids=None):
        self._query("list_businesses")
        result = list(self.businesses)
        if location_id is not None:
            result = [b for b in result if b.location_id == location_id]
        if featured is not None:
            result = [b for b in result if bool(b.featured) == featured]
        if min_rating is not None:
            result = [b for b in result if b.rating is not None and b.rating >= min_rating]
        if min_reviews is not None:
            result = [b for b in result if b.review_count is not None and b.review_count >= min_reviews]
        if ids is not None:
            wanted = set(ids)
            result = [b for b in result if b.id in wanted]
        return result

    def business_ids_for_specialization(self, specialization_id):
        self._query("business_ids_for_specialization")
        return set(self.offerings.get(specialization_id, set()))


# ─── SQLite fixtures ────────────────────────────────────────


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    eng = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    return eng


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    """Create a database session for testing, rolled back after each test."""
    sess = session_factory()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture
def repo(session):
    """Create a DirectoryRepository instance for testing."""
    return DirectoryRepository(session)
