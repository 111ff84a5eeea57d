"""
SQLAlchemy ORM models for the Groomer Directory.

Locations and specializations are small curated vocabularies; businesses
are the long tail. The ``services`` and ``opening_hours`` columns are
stored as raw JSON values (a list in some records, a bare string in
others) and are normalized on read by ``directory.fields``.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    String, Integer, Float, Text, DateTime, Boolean, JSON,
    ForeignKey, Index, func, false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groomer_directory.data.database import Base


class Location(Base):
    """A named area of the city used to scope listings."""
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True)

    businesses: Mapped[list["Business"]] = relationship(back_populates="location")

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name='{self.name}')>"


class Specialization(Base):
    """A named service category, e.g. 'Puppy Grooming'."""
    __tablename__ = "specializations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    icon_type: Mapped[Optional[str]] = mapped_column(String(50))

    def __repr__(self) -> str:
        return f"<Specialization(id={self.id}, name='{self.name}')>"


# Location and specialization names are unique ignoring case.
Index("uq_locations_name_lower", func.lower(Location.name), unique=True)
Index("uq_specializations_name_lower", func.lower(Specialization.name), unique=True)


class Business(Base):
    """A groomer listed in the directory."""
    __tablename__ = "businesses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    location_id: Mapped[Optional[int]] = mapped_column(ForeignKey("locations.id"), index=True)
    rating: Mapped[Optional[float]] = mapped_column(Float)
    review_count: Mapped[Optional[int]] = mapped_column(Integer)
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    website: Mapped[Optional[str]] = mapped_column(String(500))
    address: Mapped[Optional[str]] = mapped_column(String(500))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    place_id: Mapped[Optional[str]] = mapped_column(String(255))
    services: Mapped[Optional[Any]] = mapped_column(JSON)
    opening_hours: Mapped[Optional[Any]] = mapped_column(JSON)
    featured: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    image_url: Mapped[Optional[str]] = mapped_column(Text)

    location: Mapped[Optional["Location"]] = relationship(back_populates="businesses")

    __table_args__ = (Index("ix_businesses_location_rating", "location_id", "rating"),)

    @property
    def location_name(self) -> Optional[str]:
        return self.location.name if self.location is not None else None

    def __repr__(self) -> str:
        return f"<Business(id={self.id}, name='{self.name}', rating={self.rating})>"


class BusinessServiceOffering(Base):
    """Join table: which businesses offer which specializations."""
    __tablename__ = "business_service_offerings"

    business_id: Mapped[int] = mapped_column(ForeignKey("businesses.id", ondelete="CASCADE"), primary_key=True)
    specialization_id: Mapped[int] = mapped_column(
        ForeignKey("specializations.id", ondelete="CASCADE"), primary_key=True, index=True
    )


class ContactMessage(Base):
    """A message submitted through the public contact form."""
    __tablename__ = "contact_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255))
    message: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<ContactMessage(id={self.id}, email='{self.email}')>"
