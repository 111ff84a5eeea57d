"""SEO: page metadata, breadcrumbs, and the XML sitemap."""

from groomer_directory.seo.metadata import (
    PageMetadata,
    not_found_metadata,
    location_page_metadata,
    specialization_page_metadata,
    listing_page_metadata,
    business_page_metadata,
    breadcrumb_json_ld,
)
from groomer_directory.seo.sitemap import SitemapEntry, build_sitemap_entries, render_sitemap_xml

__all__ = [
    "PageMetadata",
    "not_found_metadata",
    "location_page_metadata",
    "specialization_page_metadata",
    "listing_page_metadata",
    "business_page_metadata",
    "breadcrumb_json_ld",
    "SitemapEntry",
    "build_sitemap_entries",
    "render_sitemap_xml",
]
