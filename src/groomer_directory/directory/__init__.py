"""Directory core: slugs, field normalization, entity resolution, and listings."""

from groomer_directory.directory.slugs import normalize_to_slug, business_slug
from groomer_directory.directory.fields import (
    Service, OpeningHours, parse_services, parse_opening_hours, classify_raw_field,
)
from groomer_directory.directory.resolver import (
    EntityKind, Resolution, EntityResolver, resolve_path_segment, find_slug_collisions,
)
from groomer_directory.directory.listing import ListingEngine, SortOrder

__all__ = [
    "normalize_to_slug", "business_slug",
    "Service", "OpeningHours", "parse_services", "parse_opening_hours", "classify_raw_field",
    "EntityKind", "Resolution", "EntityResolver", "resolve_path_segment", "find_slug_collisions",
    "ListingEngine", "SortOrder",
]
