"""
XML sitemap generation.

Enumerates static pages, every business profile, every location and
specialization listing, and each location x specialization combination.
All slugs come from ``normalize_to_slug`` so sitemap URLs match the ones
the resolver accepts.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional
from urllib.parse import urlencode
from xml.etree import ElementTree as ET

from pydantic import BaseModel

from groomer_directory.config import settings
from groomer_directory.directory.slugs import business_slug, normalize_to_slug
from groomer_directory.directory.urls import groomer_url

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

# path, change frequency, priority
STATIC_ROUTES: tuple[tuple[str, str, float], ...] = (
    ("", "daily", 1.0),
    ("/about", "monthly", 0.8),
    ("/contact", "monthly", 0.8),
    ("/groomers", "daily", 0.9),
    ("/privacy", "monthly", 0.5),
    ("/terms", "monthly", 0.5),
    ("/disclaimer", "monthly", 0.5),
)


class SitemapEntry(BaseModel):
    url: str
    last_modified: datetime
    change_frequency: str = "weekly"
    priority: float = 0.5


def _listing_url(base: str, **params: str) -> str:
    return f"{base}/groomers?{urlencode(params)}"


def build_sitemap_entries(
    locations: Iterable[Any],
    specializations: Iterable[Any],
    businesses: Iterable[Any],
    base_url: str | None = None,
    now: Optional[datetime] = None,
) -> list[SitemapEntry]:
    """
    All sitemap entries, static routes first.

    Args:
        locations: Locations to list, in display order.
        specializations: Specializations to list, in display order.
        businesses: Businesses to list.
        base_url: Site origin; defaults to settings.
        now: Timestamp for lastmod; defaults to the current UTC time.
    """
    base = (base_url or settings.site.base_url).rstrip("/")
    stamp = now or datetime.now(timezone.utc)
    location_slugs = [normalize_to_slug(loc.name) for loc in locations]
    specialization_slugs = [normalize_to_slug(spec.name) for spec in specializations]

    entries = [
        SitemapEntry(url=f"{base}{path}", last_modified=stamp, change_frequency=freq, priority=priority)
        for path, freq, priority in STATIC_ROUTES
    ]
    entries.extend(
        SitemapEntry(url=f"{base}{groomer_url(business_slug(b))}", last_modified=stamp, priority=0.7)
        for b in businesses
    )
    entries.extend(
        SitemapEntry(url=_listing_url(base, location=slug), last_modified=stamp, priority=0.6)
        for slug in location_slugs
    )
    entries.extend(
        SitemapEntry(url=_listing_url(base, specialization=slug), last_modified=stamp, priority=0.6)
        for slug in specialization_slugs
    )
    entries.extend(
        SitemapEntry(
            url=_listing_url(base, location=loc_slug, specialization=spec_slug),
            last_modified=stamp,
            priority=0.5,
        )
        for loc_slug in location_slugs
        for spec_slug in specialization_slugs
    )
    return entries


def render_sitemap_xml(entries: Iterable[SitemapEntry]) -> str:
    """Serialize entries as a sitemaps.org urlset document."""
    urlset = ET.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for entry in entries:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = entry.url
        ET.SubElement(url, "lastmod").text = entry.last_modified.isoformat()
        ET.SubElement(url, "changefreq").text = entry.change_frequency
        ET.SubElement(url, "priority").text = f"{entry.priority:.1f}"
    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'
