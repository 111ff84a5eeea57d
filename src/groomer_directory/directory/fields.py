"""
Normalization of loosely-typed business fields.

``services`` and ``opening_hours`` arrive as JSON arrays, JSON-encoded
strings, comma-separated text or plain text, depending on how a record was
imported. ``classify_raw_field`` turns any of these into one of the
``RawField`` variants at the boundary; the parsers below are total over
that union and never raise.
"""

import json
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel

from groomer_directory.logging_config import get_logger

logger = get_logger(__name__)


class Service(BaseModel):
    """A service a business offers, as shown on its profile."""

    id: str
    name: str
    description: Optional[str] = None
    price_from: Optional[float] = None
    price_to: Optional[float] = None
    duration_minutes: Optional[int] = None


class OpeningHours(BaseModel):
    day: str
    hours: str


DEFAULT_OPENING_HOURS: tuple[tuple[str, str], ...] = (
    ("Monday - Friday", "9:00 AM - 5:00 PM"),
    ("Saturday", "10:00 AM - 4:00 PM"),
    ("Sunday", "Closed"),
)


# --- Raw field variants ---


@dataclass(frozen=True)
class Absent:
    """No value stored."""


@dataclass(frozen=True)
class JsonArray:
    """A structured list, either stored natively or decoded from JSON."""

    items: tuple


@dataclass(frozen=True)
class CommaString:
    """Free text listing several values separated by commas."""

    text: str


@dataclass(frozen=True)
class PlainString:
    """A single free-text value."""

    text: str


RawField = Union[JsonArray, CommaString, PlainString, Absent]


def _classify_text(text: str) -> RawField:
    return CommaString(text) if "," in text else PlainString(text)


def classify_raw_field(raw: Any) -> RawField:
    """
    Decide which shape a stored value has.

    JSON objects are treated as a one-element array, a JSON string value
    as plain text (commas inside it are not split), and any other JSON
    scalar as the text it was written as.
    """
    if raw is None:
        return Absent()
    if isinstance(raw, (list, tuple)):
        return JsonArray(tuple(raw))
    if isinstance(raw, dict):
        return JsonArray((raw,))
    if not isinstance(raw, str):
        return PlainString(str(raw))
    if not raw.strip():
        return Absent()

    try:
        decoded = json.loads(raw)
    except (ValueError, RecursionError):
        return _classify_text(raw)

    if decoded is None:
        return Absent()
    if isinstance(decoded, list):
        return JsonArray(tuple(decoded))
    if isinstance(decoded, dict):
        return JsonArray((decoded,))
    if isinstance(decoded, str):
        return PlainString(decoded) if decoded.strip() else Absent()
    return _classify_text(raw)


# --- Services ---


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().lstrip("£$€"))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_int(value: Any) -> Optional[int]:
    number = _as_number(value)
    return int(number) if number is not None else None


def _optional_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _service_from_item(index: int, item: Any) -> Optional[Service]:
    if isinstance(item, str):
        name = item.strip()
        return Service(id=f"service-{index}", name=name) if name else None

    if isinstance(item, dict):
        name = _optional_text(item.get("name"))
        if name is None:
            return None
        item_id = item.get("id")
        return Service(
            id=str(item_id) if item_id not in (None, "") else f"service-{index}",
            name=name,
            description=_optional_text(item.get("description")),
            price_from=_as_number(item.get("price_from")),
            price_to=_as_number(item.get("price_to")),
            duration_minutes=_as_int(item.get("duration_minutes")),
        )

    return None


def parse_services(raw: Any) -> list[Service]:
    """
    Normalize a stored services value into an ordered list of services.

    Args:
        raw: JSON text, a list of strings/objects, comma-separated text,
             plain text, or None.

    Returns:
        Services in input order; empty when nothing is stored.
    """
    field = classify_raw_field(raw)

    if isinstance(field, JsonArray):
        services = []
        for index, item in enumerate(field.items):
            service = _service_from_item(index, item)
            if service is None:
                logger.debug("Skipping unusable service entry at index %d: %r", index, item)
                continue
            services.append(service)
        return services

    if isinstance(field, CommaString):
        names = [piece.strip() for piece in field.text.split(",")]
        return [
            Service(id=f"service-{index}", name=name)
            for index, name in enumerate(n for n in names if n)
        ]

    if isinstance(field, PlainString):
        name = field.text.strip()
        return [Service(id="service-1", name=name)] if name else []

    return []


# --- Opening Hours ---


def default_opening_hours() -> list[OpeningHours]:
    """The schedule shown when a business has no usable hours."""
    return [OpeningHours(day=day, hours=hours) for day, hours in DEFAULT_OPENING_HOURS]


def _hours_from_item(item: Any) -> list[OpeningHours]:
    if isinstance(item, dict):
        day = _optional_text(item.get("day"))
        if day is not None:
            hours = _optional_text(item.get("hours"))
            return [OpeningHours(day=day, hours=hours or "Closed")]
        # {"Monday": "9-5", ...}
        return [
            OpeningHours(day=key.strip(), hours=value.strip())
            for key, value in item.items()
            if isinstance(key, str) and isinstance(value, str) and key.strip()
        ]

    if isinstance(item, str) and ":" in item:
        # "Monday: 9:00 AM – 5:00 PM"
        day, hours = item.split(":", 1)
        if day.strip() and hours.strip():
            return [OpeningHours(day=day.strip(), hours=hours.strip())]

    return []


def parse_opening_hours(raw: Any) -> list[OpeningHours]:
    """
    Normalize a stored opening hours value.

    Falls back to the default weekly schedule whenever nothing usable can be
    read, so a profile always shows plausible hours.
    """
    field = classify_raw_field(raw)

    if isinstance(field, JsonArray):
        entries: list[OpeningHours] = []
        for item in field.items:
            entries.extend(_hours_from_item(item))
        if entries:
            return entries

    return default_opening_hours()
