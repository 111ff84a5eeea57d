from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional, List

from groomer_directory.directory.fields import OpeningHours, Service, parse_opening_hours, parse_services
from groomer_directory.directory.slugs import business_slug, normalize_to_slug
from groomer_directory.directory.specializations import fallback_description, icon_type_for
from groomer_directory.directory.urls import groomer_url, image_url
from groomer_directory.seo.metadata import PageMetadata


class HealthResponse(BaseModel):
    status: str
    database: bool


class LocationOut(BaseModel):
    id: int
    name: str
    slug: str
    business_count: int = 0

    @classmethod
    def from_location(cls, location, business_count: int = 0) -> "LocationOut":
        return cls(
            id=location.id,
            name=location.name,
            slug=normalize_to_slug(location.name),
            business_count=business_count,
        )


class SpecializationOut(BaseModel):
    id: int
    name: str
    slug: str
    description: str
    icon_type: str

    @classmethod
    def from_specialization(cls, spec) -> "SpecializationOut":
        return cls(
            id=spec.id,
            name=spec.name,
            slug=normalize_to_slug(spec.name),
            description=spec.description or fallback_description(spec.name),
            icon_type=spec.icon_type or icon_type_for(spec.name),
        )


class BusinessSummary(BaseModel):
    """A business as shown on listing cards."""
    id: int
    name: str
    slug: str
    url: str
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    featured: bool = False
    image_url: str

    @classmethod
    def from_business(cls, business) -> "BusinessSummary":
        slug = business_slug(business)
        return cls(
            id=business.id,
            name=business.name,
            slug=slug,
            url=groomer_url(slug),
            description=business.description,
            location=business.location_name,
            address=business.address,
            phone=business.phone,
            rating=business.rating,
            review_count=business.review_count,
            featured=bool(business.featured),
            image_url=image_url(business.image_url),
        )


class BusinessDetail(BusinessSummary):
    """A business profile with normalized services and opening hours."""
    email: Optional[str] = None
    website: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_id: Optional[str] = None
    services: List[Service] = Field(default_factory=list)
    opening_hours: List[OpeningHours] = Field(default_factory=list)

    @classmethod
    def from_business(cls, business) -> "BusinessDetail":
        summary = BusinessSummary.from_business(business)
        return cls(
            **summary.model_dump(),
            email=business.email,
            website=business.website,
            latitude=business.latitude,
            longitude=business.longitude,
            place_id=business.place_id,
            services=parse_services(business.services),
            opening_hours=parse_opening_hours(business.opening_hours),
        )


class ListingResponse(BaseModel):
    """A listing page: optional featured pick plus the remaining businesses."""
    page_type: str = "listing"
    metadata: PageMetadata
    location: Optional[LocationOut] = None
    specialization: Optional[SpecializationOut] = None
    featured: Optional[BusinessSummary] = None
    businesses: List[BusinessSummary] = Field(default_factory=list)
    total: int = 0


class BusinessPageResponse(BaseModel):
    page_type: str = "business"
    metadata: PageMetadata
    business: BusinessDetail
    breadcrumb: Dict[str, Any]
    nearby: List[BusinessSummary] = Field(default_factory=list)


class ContactRequest(BaseModel):
    """Contact form submission. Fields are validated by the contact service."""
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Sam Taylor",
                "email": "sam@example.com",
                "message": "Is my salon listed correctly?",
            }
        }
    )


class ContactResponse(BaseModel):
    success: bool
    message: str
    id: Optional[int] = None
