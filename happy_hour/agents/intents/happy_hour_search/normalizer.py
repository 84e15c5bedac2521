"""
Normalizer for the `happy_hour_search` intent.

Turns loosely-typed records parsed from model output into `Venue` objects.

Field rules
-----------
- name / address / cuisine / price_range: text. Lists of strings are joined
  with ", "; missing or unusable values become a placeholder label.
- website: text or None.
- details: always a list of strings. A single string becomes a one-item list.
- position: `latitude`/`longitude`, or `position: {lat, lng}`. Records whose
  coordinates are missing, non-finite, or both exactly zero are dropped.
- id: "<slug>-<index>-<lat>,<lng>", with a random suffix on collision.

A bad record is logged and skipped; the rest of the batch carries on. A
payload that is not a list at all is treated as "no results".
"""

import math
import re
import uuid
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from pydantic import ValidationError

from happy_hour.agents.happy_hour.schema import Position, Venue
from happy_hour.constants import NO_DETAILS, NOT_AVAILABLE, UNNAMED_PLACE
from happy_hour.errors import MalformedRecord
from happy_hour.logger import LOGGER

_SCALAR_TYPES = (str, int, float)


def _scalar_text(value: Any) -> str:
    """Stripped text of a str/int/float, or "" for anything else."""
    if isinstance(value, bool) or not isinstance(value, _SCALAR_TYPES):
        return ""
    try:
        return str(value).strip()
    except ValueError:
        # int too long for str() (interpreter digit limit)
        return ""


def coerce_text(value: Any, placeholder: str) -> str:
    """Coerce a loosely-typed field to display text, never returning an empty value."""
    if isinstance(value, (list, tuple)):
        parts = [_scalar_text(item) for item in value]
        joined = ", ".join(p for p in parts if p)
        return joined or placeholder
    return _scalar_text(value) or placeholder


def coerce_optional_text(value: Any) -> Optional[str]:
    text = coerce_text(value, "")
    return text or None


def coerce_details(value: Any) -> List[str]:
    """Deal lines as a list of strings."""
    if isinstance(value, str):
        items: List[Any] = [value]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = []
    lines = [line for line in map(_scalar_text, items) if line]
    return lines or [NO_DETAILS]


def _coerce_coordinate(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _raw_coordinates(record: Mapping[str, Any]) -> Tuple[Any, Any]:
    if "latitude" in record or "longitude" in record:
        return record.get("latitude"), record.get("longitude")
    position = record.get("position")
    if isinstance(position, Mapping):
        return position.get("lat"), position.get("lng")
    return record.get("lat"), record.get("lng")


def _preview(value: Any) -> str:
    text = _scalar_text(value)
    return repr(text[:40]) if text else type(value).__name__


def coerce_position(record: Mapping[str, Any], index: int) -> Position:
    raw_lat, raw_lng = _raw_coordinates(record)
    lat = _coerce_coordinate(raw_lat)
    lng = _coerce_coordinate(raw_lng)
    if lat is None or lng is None:
        raise MalformedRecord(index, f"unusable coordinates ({_preview(raw_lat)}, {_preview(raw_lng)})")
    try:
        return Position(lat=lat, lng=lng)
    except ValidationError as exc:
        raise MalformedRecord(index, f"invalid position ({lat}, {lng}): {exc.errors()[0]['msg']}") from exc


def _slug(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "place"


def make_venue_id(name: str, index: int, position: Position, taken: Set[str]) -> str:
    """Deterministic id from name, batch index and rounded position; random suffix only on collision."""
    venue_id = f"{_slug(name)}-{index}-{position.lat:.4f},{position.lng:.4f}"
    while venue_id in taken:
        venue_id = f"{venue_id}-{uuid.uuid4().hex[:8]}"
    taken.add(venue_id)
    return venue_id


def normalize_record(record: Any, index: int, taken: Set[str]) -> Venue:
    """Build one `Venue` or raise `MalformedRecord`."""
    if not isinstance(record, Mapping):
        raise MalformedRecord(index, f"expected an object, got {type(record).__name__}")

    position = coerce_position(record, index)
    name = coerce_text(record.get("name"), UNNAMED_PLACE)
    fields: Dict[str, Any] = {
        "name": name,
        "address": coerce_text(record.get("address"), NOT_AVAILABLE),
        "details": coerce_details(record.get("details")),
        "website": coerce_optional_text(record.get("website")),
        "cuisine": coerce_text(record.get("cuisine"), NOT_AVAILABLE),
        "price_range": coerce_text(record.get("price_range"), NOT_AVAILABLE),
        "position": position,
    }
    try:
        return Venue(id=make_venue_id(name, index, position, taken), **fields)
    except ValidationError as exc:
        raise MalformedRecord(index, str(exc)) from exc


def normalize_records(payload: Any) -> List[Venue]:
    """Normalize a parsed payload into venues, dropping records that fail validation."""
    if not isinstance(payload, list):
        LOGGER.warning("Expected a JSON array of venues, got %s; treating as no results", type(payload).__name__)
        return []

    venues: List[Venue] = []
    taken: Set[str] = set()
    for index, record in enumerate(payload):
        try:
            venues.append(normalize_record(record, index, taken))
        except MalformedRecord as exc:
            LOGGER.warning("Dropping malformed venue record %d: %s", exc.index, exc.reason)

    if len(venues) < len(payload):
        LOGGER.info("Normalized %d of %d venue records", len(venues), len(payload))
    return venues


__all__ = [
    "coerce_details",
    "coerce_position",
    "coerce_text",
    "make_venue_id",
    "normalize_record",
    "normalize_records",
]
