"""
Page metadata: titles, descriptions, canonical URLs and JSON-LD.
"""

from typing import Any, Optional

from pydantic import BaseModel

from groomer_directory.config import settings
from groomer_directory.directory.slugs import business_slug
from groomer_directory.directory.urls import canonical_url, groomer_url, location_url, specialization_url


class PageMetadata(BaseModel):
    title: str
    description: str
    canonical: Optional[str] = None


def not_found_metadata() -> PageMetadata:
    return PageMetadata(
        title="Page Not Found",
        description="The requested page could not be found.",
    )


def location_page_metadata(location: Any) -> PageMetadata:
    name = location.name
    return PageMetadata(
        title=f"Dog Groomers in {name} | {settings.site.name}",
        description=(
            f"Find the best professional dog groomers in {name}. Compare services, read reviews, "
            f"and book appointments for dog grooming in {name}."
        ),
        canonical=canonical_url(location_url(name)),
    )


def specialization_page_metadata(specialization: Any, path: str | None = None) -> PageMetadata:
    """
    Metadata for a specialization page.

    Args:
        specialization: The specialization shown.
        path: Canonical path; defaults to the /service/<slug> page.
    """
    name = specialization.name
    city = settings.site.city
    return PageMetadata(
        title=f"{name} Dog Grooming Services in {city} | Specialized Groomers",
        description=specialization.description or (
            f"Find dog groomers offering {name} services in {city}. Expert groomers "
            f"specializing in {name.lower()} for your pet's needs."
        ),
        canonical=canonical_url(path or specialization_url(name)),
    )


def listing_page_metadata(location: Any = None, specialization: Any = None) -> PageMetadata:
    """Title and description for the /groomers listing given its active filters."""
    city = settings.site.city
    if location is not None and specialization is not None:
        title = f"{specialization.name} Dog Grooming in {location.name}"
        description = (
            f"Find dog groomers offering {specialization.name} services in {location.name}. "
            f"Expert groomers specializing in {specialization.name.lower()} for your pet's needs."
        )
    elif location is not None:
        title = f"Dog Groomers in {location.name}"
        description = (
            f"Find the best professional dog groomers in {location.name}. Compare services, "
            f"read reviews, and book appointments for dog grooming in {location.name}."
        )
    elif specialization is not None:
        title = f"{specialization.name} Dog Grooming Services in {city}"
        description = (
            f"Find dog groomers offering {specialization.name} services in {city}. Expert "
            f"groomers specializing in {specialization.name.lower()} for your pet's needs."
        )
    else:
        title = f"Dog Groomers in {city}"
        description = (
            f"Find professional dog grooming services across {city}. Compare groomers, read "
            "reviews, and book appointments for your furry friend."
        )
    return PageMetadata(title=title, description=description, canonical=canonical_url("/groomers"))


def business_page_metadata(business: Any) -> PageMetadata:
    location_name = business.location_name or settings.site.city
    return PageMetadata(
        title=f"{business.name} - Dog Groomer in {location_name} | {settings.site.name}",
        description=business.description or (
            f"{business.name} is a professional dog groomer in {location_name}. "
            "View services, opening hours, reviews and contact details."
        ),
        canonical=canonical_url(groomer_url(business_slug(business))),
    )


def breadcrumb_json_ld(business: Any, base_url: str | None = None) -> dict[str, Any]:
    """schema.org BreadcrumbList for a business profile page."""
    base = (base_url or settings.site.base_url).rstrip("/")
    items = [
        {"@type": "ListItem", "position": 1, "name": "Home", "item": base},
        {"@type": "ListItem", "position": 2, "name": "Dog Groomers", "item": f"{base}/groomers"},
    ]
    if business.location_name:
        items.append({
            "@type": "ListItem",
            "position": 3,
            "name": f"{business.location_name} Dog Groomers",
            "item": canonical_url(location_url(business.location_name), base),
        })
    items.append({
        "@type": "ListItem",
        "position": len(items) + 1,
        "name": business.name,
        "item": f"{base}{groomer_url(business_slug(business))}",
    })
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": items,
    }
