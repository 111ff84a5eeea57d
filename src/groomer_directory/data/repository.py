"""
Repository layer: the data access collaborator for the directory core.

``DirectoryStore`` is the query interface the resolver and listing engine
depend on: fetch by exact name, fetch by substring, fetch by id, fetch all
with equality/threshold filters, and the business <-> specialization join
lookup. ``DirectoryRepository`` implements it on a SQLAlchemy session; tests
substitute an in-memory fake.
"""

import functools
from typing import Iterable, Optional, Protocol

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from groomer_directory.data.models import (
    Location,
    Specialization,
    Business,
    BusinessServiceOffering,
    ContactMessage,
)
from groomer_directory.directory.slugs import normalize_to_slug
from groomer_directory.logging_config import get_logger
from groomer_directory.exceptions import DatabaseQueryError

logger = get_logger(__name__)


class DirectoryStore(Protocol):
    """Read-side query interface consumed by the resolver and listing engine."""

    def list_locations(self) -> list[Location]: ...

    def list_specializations(self) -> list[Specialization]: ...

    def find_location_by_name(self, name: str) -> Optional[Location]: ...

    def find_specialization_by_name(self, name: str) -> Optional[Specialization]: ...

    def search_specializations(self, text: str) -> list[Specialization]: ...

    def get_location(self, location_id: int) -> Optional[Location]: ...

    def get_specialization(self, specialization_id: int) -> Optional[Specialization]: ...

    def get_business(self, business_id: int) -> Optional[Business]: ...

    def get_business_by_slug(self, slug: str) -> Optional[Business]: ...

    def list_businesses(
        self,
        location_id: int | None = None,
        featured: bool | None = None,
        min_rating: float | None = None,
        min_reviews: int | None = None,
        ids: Iterable[int] | None = None,
    ) -> list[Business]: ...

    def business_ids_for_specialization(self, specialization_id: int) -> set[int]: ...


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text is matched literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _translate_errors(method):
    """Re-raise SQLAlchemy failures as DatabaseQueryError."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            raise DatabaseQueryError(
                message=f"{method.__name__} failed: {e}",
                details={"operation": method.__name__},
            ) from e

    return wrapper


class DirectoryRepository:
    """
    All database operations for directory data.

    Usage:
        session_factory = create_session_factory()
        with session_factory() as session:
            repo = DirectoryRepository(session)
            repo.find_location_by_name("camden")
    """

    def __init__(self, session: Session):
        self.session = session

    # --- Locations ---

    @_translate_errors
    def list_locations(self) -> list[Location]:
        """All locations ordered by name."""
        return list(self.session.scalars(select(Location).order_by(Location.name)))

    @_translate_errors
    def find_location_by_name(self, name: str) -> Optional[Location]:
        """Case-insensitive exact name match."""
        stmt = select(Location).where(func.lower(Location.name) == name.lower()).limit(1)
        return self.session.scalars(stmt).first()

    @_translate_errors
    def get_location(self, location_id: int) -> Optional[Location]:
        return self.session.get(Location, location_id)

    @_translate_errors
    def location_business_counts(self) -> dict[int, int]:
        """Number of businesses per location id."""
        stmt = (
            select(Business.location_id, func.count(Business.id))
            .where(Business.location_id.is_not(None))
            .group_by(Business.location_id)
        )
        return {location_id: count for location_id, count in self.session.execute(stmt)}

    @_translate_errors
    def add_location(self, name: str) -> Location:
        loc = Location(name=name)
        self.session.add(loc)
        self.session.flush()
        return loc

    # --- Specializations ---

    @_translate_errors
    def list_specializations(self) -> list[Specialization]:
        """All specializations ordered by name."""
        return list(self.session.scalars(select(Specialization).order_by(Specialization.name)))

    @_translate_errors
    def find_specialization_by_name(self, name: str) -> Optional[Specialization]:
        """Case-insensitive exact name match."""
        stmt = (
            select(Specialization)
            .where(func.lower(Specialization.name) == name.lower())
            .limit(1)
        )
        return self.session.scalars(stmt).first()

    @_translate_errors
    def search_specializations(self, text: str) -> list[Specialization]:
        """Case-insensitive substring match, in store (id) order."""
        pattern = f"%{_escape_like(text)}%"
        stmt = (
            select(Specialization)
            .where(Specialization.name.ilike(pattern, escape="\\"))
            .order_by(Specialization.id)
        )
        return list(self.session.scalars(stmt))

    @_translate_errors
    def get_specialization(self, specialization_id: int) -> Optional[Specialization]:
        return self.session.get(Specialization, specialization_id)

    @_translate_errors
    def count_specializations(self) -> int:
        return self.session.scalar(select(func.count(Specialization.id))) or 0

    @_translate_errors
    def add_specialization(
        self,
        name: str,
        description: str | None = None,
        icon_type: str | None = None,
    ) -> Specialization:
        spec = Specialization(name=name, description=description, icon_type=icon_type)
        self.session.add(spec)
        self.session.flush()
        return spec

    # --- Businesses ---

    @_translate_errors
    def get_business(self, business_id: int) -> Optional[Business]:
        return self.session.get(Business, business_id)

    @_translate_errors
    def get_business_by_slug(self, slug: str) -> Optional[Business]:
        """
        Find a business by its stored slug.

        Businesses without a stored slug are matched on the slug derived
        from their name, so URLs emitted for them in the sitemap resolve.
        """
        stmt = (
            select(Business)
            .options(selectinload(Business.location))
            .where(Business.slug == slug)
            .order_by(Business.id)
            .limit(1)
        )
        business = self.session.scalars(stmt).first()
        if business is not None:
            return business

        unslugged = select(Business).where(Business.slug.is_(None)).order_by(Business.id)
        for candidate in self.session.scalars(unslugged):
            if normalize_to_slug(candidate.name) == slug:
                return candidate
        return None

    @_translate_errors
    def list_businesses(
        self,
        location_id: int | None = None,
        featured: bool | None = None,
        min_rating: float | None = None,
        min_reviews: int | None = None,
        ids: Iterable[int] | None = None,
    ) -> list[Business]:
        """
        Businesses matching all given filters, in store (id) order.

        Args:
            location_id: Equality filter on location.
            featured: Equality filter on the featured flag.
            min_rating: Inclusive lower bound on rating.
            min_reviews: Inclusive lower bound on review count.
            ids: Restrict to these business ids.
        """
        stmt = select(Business).options(selectinload(Business.location))
        if location_id is not None:
            stmt = stmt.where(Business.location_id == location_id)
        if featured is not None:
            stmt = stmt.where(Business.featured == featured)
        if min_rating is not None:
            stmt = stmt.where(Business.rating >= min_rating)
        if min_reviews is not None:
            stmt = stmt.where(Business.review_count >= min_reviews)
        if ids is not None:
            stmt = stmt.where(Business.id.in_(list(ids)))
        return list(self.session.scalars(stmt.order_by(Business.id)))

    @_translate_errors
    def add_business(self, name: str, specialization_ids: Iterable[int] = (), **kwargs) -> Business:
        """
        Add a business record and its specialization offerings.

        Args:
            name: Display name.
            specialization_ids: Specializations the business offers.
            **kwargs: Any other Business column (slug, location_id, rating, ...).
        """
        business = Business(name=name, **kwargs)
        self.session.add(business)
        self.session.flush()
        for spec_id in specialization_ids:
            self.session.add(BusinessServiceOffering(business_id=business.id, specialization_id=spec_id))
        self.session.flush()
        return business

    @_translate_errors
    def update_place_id(self, business_id: int, place_id: str) -> bool:
        """Set the Google place id for a business. Returns False if it doesn't exist."""
        business = self.session.get(Business, business_id)
        if business is None:
            return False
        business.place_id = place_id
        self.session.flush()
        return True

    @_translate_errors
    def update_place_id_by_name(self, name: str, place_id: str) -> int:
        """Set the Google place id on every business with this exact name. Returns the count."""
        businesses = list(self.session.scalars(select(Business).where(Business.name == name)))
        for business in businesses:
            business.place_id = place_id
        self.session.flush()
        return len(businesses)

    # --- Offerings ---

    @_translate_errors
    def business_ids_for_specialization(self, specialization_id: int) -> set[int]:
        """Ids of businesses offering the given specialization."""
        stmt = select(BusinessServiceOffering.business_id).where(
            BusinessServiceOffering.specialization_id == specialization_id
        )
        return set(self.session.scalars(stmt))

    # --- Contact Messages ---

    @_translate_errors
    def add_contact_message(self, name: str, email: str, message: str) -> ContactMessage:
        record = ContactMessage(name=name, email=email, message=message)
        self.session.add(record)
        self.session.flush()
        return record

    # --- Transactions ---

    @_translate_errors
    def commit(self) -> None:
        """Commit the session, rolling back if the commit fails."""
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
