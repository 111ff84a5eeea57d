"""
Site URL builders.

Every public URL is built from ``normalize_to_slug`` output so that page
links, canonical tags and the sitemap agree on one form.
"""

import re
from urllib.parse import urlparse

from groomer_directory.config import settings
from groomer_directory.directory.slugs import normalize_to_slug


def groomer_url(slug: str) -> str:
    return f"/groomers/{slug}"


def location_url(location_name: str) -> str:
    return f"/{normalize_to_slug(location_name)}"


def specialization_url(specialization_name: str) -> str:
    return f"/service/{normalize_to_slug(specialization_name)}"


def canonical_url(path: str, base_url: str | None = None) -> str:
    """Absolute URL for a site path."""
    base = (base_url or settings.site.base_url).rstrip("/")
    if not path.startswith("/"):
        path = "/" + path
    return f"{base}{path}"


def image_url(
    image_path: str | None,
    storage_base_url: str | None = None,
    default_image: str | None = None,
) -> str:
    """
    Public URL for a business image.

    Blank paths and malformed absolute URLs fall back to the default image;
    storage paths are expanded against the public storage bucket URL.
    """
    default = default_image or settings.site.default_image
    if not image_path or not image_path.strip():
        return default

    if image_path.startswith("http"):
        parsed = urlparse(image_path)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return image_path
        return default

    base = storage_base_url or settings.site.storage_url
    if not base:
        return default

    clean_path = re.sub(r"^/+", "", image_path)
    clean_path = re.sub(r"^storage/", "", clean_path)
    return f"{base.rstrip('/')}/storage/v1/object/public/{clean_path}"
