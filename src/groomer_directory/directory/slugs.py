"""Slug normalization shared by routing, canonical redirects and the sitemap."""

import re
from typing import Any

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def normalize_to_slug(name: str) -> str:
    """
    Canonical URL-safe identifier for a display name.

    'Fish & Chips Ltd.' → 'fish-and-chips-ltd'. Idempotent; '' → ''.
    """
    slug = name.lower().replace("&", "and")
    slug = _NON_ALNUM_RUN.sub("-", slug)
    return slug.strip("-")


def business_slug(business: Any) -> str:
    """The stored slug of a business, or one derived from its name."""
    return business.slug or normalize_to_slug(business.name)
